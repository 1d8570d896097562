"""Utility functions for storing registered SSH key entries."""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import ConfigIOError, ConfigParseError

SSH_KEYS_FILE = ".switchssh"
# Mode used when the directory holding the key file has to be created
KEYS_DIR_MODE = 0o755


def default_keys_file() -> Path:
    """Return the location of the key file inside the user's home directory."""
    return Path.home() / SSH_KEYS_FILE


def make_record(path: str, alias: str, sudo_mode: bool = False) -> Dict[str, Any]:
    return {"path": path, "alias": alias, "sudo_mode": bool(sudo_mode)}


def _parse_record(entry: Any, path: Path) -> Dict[str, Any]:
    if not isinstance(entry, dict) or not isinstance(entry.get("path"), str):
        raise ConfigParseError(f"Invalid key entry in {path}: {entry!r}")
    alias = entry.get("alias")
    if alias is None:
        alias = os.path.basename(entry["path"])
    if not isinstance(alias, str):
        raise ConfigParseError(f"Invalid alias in {path}: {alias!r}")
    # Older files may carry the camelCase spelling of the flag
    sudo_mode = entry.get("sudo_mode", entry.get("sudoMode", False))
    if not isinstance(sudo_mode, bool):
        raise ConfigParseError(f"Invalid sudo_mode in {path}: {sudo_mode!r}")
    return make_record(entry["path"], alias, sudo_mode)


def ensure_keys_dir(file_path: Union[str, Path]) -> Path:
    """Create the directory holding ``file_path`` when it is missing."""
    directory = Path(file_path).parent
    try:
        directory.mkdir(mode=KEYS_DIR_MODE, parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigIOError(f"Error creating config directory {directory}: {exc}") from exc
    return directory


def load_keys(file_path: Optional[Union[str, Path]] = None) -> List[Dict[str, Any]]:
    """Load SSH key records from a JSON file.

    Parameters
    ----------
    file_path: str | Path, optional
        Location of the key file. Defaults to :func:`default_keys_file`.

    Returns
    -------
    list[dict]
        Records in stored order. Empty when the file does not exist.

    Raises
    ------
    ConfigIOError
        The directory could not be created or the file could not be read.
    ConfigParseError
        The file content is not a ``{"keys": [...]}`` document.
    """
    logger = logging.getLogger(__name__)
    path = Path(file_path) if file_path is not None else default_keys_file()
    ensure_keys_dir(path)
    if not path.exists():
        logger.info("SSH key file %s not found", path)
        return []
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigParseError(f"Error parsing config file {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigIOError(f"Error reading config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigParseError(f"SSH key file {path} has invalid format")
    entries = data.get("keys")
    if entries is None:
        entries = []
    if not isinstance(entries, list):
        raise ConfigParseError(f"SSH key file {path} has invalid 'keys' field")
    keys = [_parse_record(entry, path) for entry in entries]
    logger.info("Loaded %d SSH keys", len(keys))
    return keys


def save_keys(
    keys: List[Dict[str, Any]], file_path: Optional[Union[str, Path]] = None
) -> None:
    """Persist SSH key records, replacing the file atomically."""
    logger = logging.getLogger(__name__)
    path = Path(file_path) if file_path is not None else default_keys_file()
    document = {"keys": [make_record(k["path"], k["alias"], k["sudo_mode"]) for k in keys]}
    tmp_name = None
    try:
        # An existing file keeps its permissions; new files get 0644
        mode = stat.S_IMODE(path.stat().st_mode) if path.exists() else 0o644
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=str(path.parent), prefix=path.name, delete=False
        ) as handle:
            tmp_name = handle.name
            json.dump(document, handle, indent=2)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ConfigIOError(f"Error writing config file {path}: {exc}") from exc
    logger.info("Saved %d SSH keys to %s", len(keys), path)
