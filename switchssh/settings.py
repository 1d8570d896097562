"""Optional user settings for SwitchSSH.

Settings are read from :data:`SETTINGS_FILE` inside the home directory using
:mod:`configparser`.  The file is optional and every option falls back to a
default, so a missing or partial file behaves like the defaults below::

    [agent]
    add_command = ssh-add
    clear_command = ssh-add -D
    elevation_command = sudo

    [logging]
    level = INFO
    file = ~/.switchssh.log
"""

import configparser
import logging
import shlex
from pathlib import Path
from typing import List, NamedTuple, Optional, Union

SETTINGS_FILE = ".switchssh.ini"
LOG_FILE = "~/.switchssh.log"

DEFAULT_ADD_COMMAND = "ssh-add"
DEFAULT_CLEAR_COMMAND = "ssh-add -D"
DEFAULT_ELEVATION_COMMAND = "sudo"


class Settings(NamedTuple):
    add_command: List[str]
    clear_command: List[str]
    elevation_command: List[str]
    log_level: int
    log_file: Path


def default_settings_file() -> Path:
    return Path.home() / SETTINGS_FILE


def _command(cfg: configparser.ConfigParser, option: str, default: str) -> List[str]:
    value = cfg.get("agent", option, fallback=default)
    argv = shlex.split(value)
    if not argv:
        raise ValueError(f"Setting 'agent.{option}' must name a command")
    return argv


def _log_level(cfg: configparser.ConfigParser) -> int:
    name = cfg.get("logging", "level", fallback="INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{name}'")
    return level


def settings_from_config(cfg: configparser.ConfigParser) -> Settings:
    """Build :class:`Settings` from parsed configuration, applying defaults."""
    return Settings(
        add_command=_command(cfg, "add_command", DEFAULT_ADD_COMMAND),
        clear_command=_command(cfg, "clear_command", DEFAULT_CLEAR_COMMAND),
        elevation_command=_command(cfg, "elevation_command", DEFAULT_ELEVATION_COMMAND),
        log_level=_log_level(cfg),
        log_file=Path(cfg.get("logging", "file", fallback=LOG_FILE)).expanduser(),
    )


def load_settings(file_path: Optional[Union[str, Path]] = None) -> Settings:
    """Read settings from ``file_path`` (default: ``~/.switchssh.ini``).

    Raises
    ------
    configparser.Error
        The file exists but is not valid INI syntax.
    ValueError
        An option holds an unusable value.
    """
    path = Path(file_path) if file_path is not None else default_settings_file()
    cfg = configparser.ConfigParser()
    # ``read`` silently skips missing files, leaving the defaults in place
    cfg.read(path, encoding="utf-8")
    return settings_from_config(cfg)
