"""Runtime wiring helper for CLI applications."""

from pathlib import Path

from .adapters.man_commands import ManCommands
from .adapters.roff_markers import RoffStructure
from .config import AnagConfig, load_config
from .session import Session


def build_session(
    config_path: Path | None = None,
    config: AnagConfig | None = None,
    width: int | None = None,
) -> Session:
    """Build and wire a session against the system's documentation tools."""
    if config is None:
        config = load_config(config_path=config_path)
    if width is not None:
        config.layout.width = width

    cmds = config.commands
    formatter = ManCommands(
        man=cmds.man,
        apropos=cmds.apropos,
        whatis=cmds.whatis,
        width=config.layout.width,
    )
    structure = RoffStructure(man=cmds.man)
    return Session(formatter, structure, config)
