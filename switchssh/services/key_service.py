import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..agent import AgentSwitcher
from ..errors import (
    ExternalCommandError,
    InvalidSelectionError,
    KeyFileNotFoundError,
    ValidationError,
)
from ..key_store import KeyStore


class KeyService:
    """Service layer for registering SSH keys and switching the agent."""

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        switcher: Optional[AgentSwitcher] = None,
    ) -> None:
        self.file_path = file_path
        self.switcher = switcher or AgentSwitcher()
        self.logger = logging.getLogger(__name__)

    def load_store(self) -> KeyStore:
        return KeyStore.load(self.file_path)

    def list_keys(self) -> List[Tuple[int, Dict[str, Any]]]:
        return self.load_store().list()

    def resolve_key_path(self, ssh_key_path: Union[str, Path]) -> Path:
        """Expand ``~`` in ``ssh_key_path`` and check that the file exists."""
        if not str(ssh_key_path).strip():
            raise ValidationError("SSH key file path is required")
        key_path = Path(ssh_key_path).expanduser()
        if not key_path.exists():
            raise KeyFileNotFoundError(str(key_path))
        return key_path

    def register_key(
        self,
        ssh_key_path: Union[str, Path],
        alias: str = "",
        sudo_mode: bool = False,
        store: Optional[KeyStore] = None,
    ) -> Dict[str, Any]:
        """Validate and persist a new key record.

        The key file only has to exist; its contents are never read.  The store
        is saved only after the record was accepted.
        When ``store`` is omitted it is loaded from disk first.
        """
        if store is None:
            store = self.load_store()
        key_path = self.resolve_key_path(ssh_key_path)
        key = store.add(str(key_path), alias, sudo_mode)
        store.save()
        self.logger.info("SSH key '%s' registered", key["alias"])
        return key

    def select_key(self, store: KeyStore, selection: str) -> Dict[str, Any]:
        """Return the record whose display number is ``selection``."""
        try:
            ordinal = int(selection.strip())
        except ValueError as exc:
            raise InvalidSelectionError(selection) from exc
        return store.select(ordinal)

    def clear_agent(self) -> Optional[ExternalCommandError]:
        return self.switcher.clear()

    def activate_key(self, key: Dict[str, Any]) -> None:
        self.switcher.activate(key)
        self.logger.info("Switched to SSH key '%s'", key["alias"])
