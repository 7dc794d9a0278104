"""Exit classification shared by the core and the CLI."""

from enum import IntEnum


class ExitStatus(IntEnum):
    """Exit statuses, the same as those of the `man` command."""
    SUCCESS = 0
    USAGE_ERROR = 1  # wrong command-line option
    OPER_ERROR = 2  # program error
    CHILD_ERROR = 3  # child process error
    CONFIG_ERROR = 4  # configuration file parse error
    NOT_FOUND = 16  # manual page(s) not found


class CollaboratorError(RuntimeError):
    """An external collaborator broke its contract (crash, missing binary, garbage output)."""

    def __init__(self, message: str, status: ExitStatus = ExitStatus.CHILD_ERROR):
        super().__init__(message)
        self.status = status
