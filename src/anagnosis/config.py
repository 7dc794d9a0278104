"""Configuration loader for anagnosis.toml."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

CONFIG_NAME = "anagnosis.toml"


@dataclass
class CommandsConfig:
    """External documentation tools."""
    man: str = "man"
    apropos: str = "apropos"
    whatis: str = "whatis"
    index_args: str = "."  # apropos arguments that list every page


@dataclass
class LayoutConfig:
    """Page layout."""
    width: int = 80
    sections_on_top: bool = True


@dataclass
class SearchConfig:
    """Search defaults."""
    case_sensitive: bool = False


@dataclass
class LinksConfig:
    """Which link types to detect."""
    man: bool = True
    http: bool = True
    email: bool = True
    file: bool = True
    check_files: bool = True


@dataclass
class UIConfig:
    """UI configuration."""
    colors: bool = True


@dataclass
class AnagConfig:
    """Complete anagnosis configuration."""
    commands: CommandsConfig = field(default_factory=CommandsConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    links: LinksConfig = field(default_factory=LinksConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "anagnosis" / CONFIG_NAME


def _pick(cls: type, data: Any) -> Any:
    """Build dataclass `cls` from a TOML table, ignoring unknown keys."""
    if not isinstance(data, dict):
        return cls()
    defaults = cls()
    values = {}
    for name in cls.__dataclass_fields__:
        default = getattr(defaults, name)
        value = data.get(name, default)
        if type(value) is not type(default):
            raise ValueError(f"{cls.__name__}.{name}: expected {type(default).__name__}, got {value!r}")
        values[name] = value
    return cls(**values)


def load_config(config_path: Path | None = None) -> AnagConfig:
    """
    Load configuration from anagnosis.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/anagnosis.toml
    3. $XDG_CONFIG_HOME/anagnosis/anagnosis.toml

    Raises tomllib.TOMLDecodeError or ValueError for a malformed file.
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    search_paths.append(default_config_path())

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    return AnagConfig(
        commands=_pick(CommandsConfig, toml_data.get("commands", {})),
        layout=_pick(LayoutConfig, toml_data.get("layout", {})),
        search=_pick(SearchConfig, toml_data.get("search", {})),
        links=_pick(LinksConfig, toml_data.get("links", {})),
        ui=_pick(UIConfig, toml_data.get("ui", {})),
    )
