"""Formatter collaborator backed by the system's man, apropos and whatis."""

import os
import shlex
import subprocess

from ..core.ports import FormatterOutput
from ..core.status import CollaboratorError

# Exit status man-db and mandoc use for "nothing found"
NOT_FOUND = 16


class ManCommands:
    """Runs the documentation tools and hands back their raw output."""

    def __init__(
        self,
        man: str = "man",
        apropos: str = "apropos",
        whatis: str = "whatis",
        width: int = 80,
    ):
        self.man_cmd = man
        self.apropos_cmd = apropos
        self.whatis_cmd = whatis
        self.width = width

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        env.update(
            MANWIDTH=str(self.width),
            MAN_KEEP_FORMATTING="1",
            MANPAGER="cat",
            PAGER="cat",
            GROFF_NO_SGR="1",  # overstrike rather than escape sequences
        )
        return env

    def _run(self, argv: list[str]) -> FormatterOutput:
        try:
            proc = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                errors="replace",
                env=self._env(),
            )
        except OSError as e:
            raise CollaboratorError(f"Cannot run {argv[0]}: {e}") from e

        if proc.returncode == 0:
            return FormatterOutput(proc.stdout, True)

        reason = proc.stderr.strip().splitlines()
        reason_text = reason[0] if reason else f"{argv[0]} exited with status {proc.returncode}"
        if proc.returncode == NOT_FOUND:
            return FormatterOutput("", False, reason_text)
        if proc.returncode < 0:
            raise CollaboratorError(f"{argv[0]} was killed by signal {-proc.returncode}")
        # man-db uses other non-zero statuses for usage errors and the like;
        # those still mean there is nothing to show
        return FormatterOutput("", False, reason_text)

    def man(self, args: str, local_file: bool = False) -> FormatterOutput:
        argv = [self.man_cmd]
        if local_file:
            argv += ["-l", args]
        else:
            argv += shlex.split(args)
        return self._run(argv)

    def apropos(self, args: str) -> FormatterOutput:
        return self._run([self.apropos_cmd, *shlex.split(args)])

    def whatis(self, args: str) -> FormatterOutput:
        return self._run([self.whatis_cmd, *shlex.split(args)])

