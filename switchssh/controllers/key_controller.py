from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..agent import AgentSwitcher
from ..errors import ExternalCommandError
from ..key_store import KeyStore
from ..services.key_service import KeyService


class KeyController:
    """Controller coordinating SSH key service calls."""

    def __init__(
        self,
        file_path: Optional[Union[str, Path]] = None,
        switcher: Optional[AgentSwitcher] = None,
    ) -> None:
        self.service = KeyService(file_path, switcher)

    def load_store(self) -> KeyStore:
        return self.service.load_store()

    def list_keys(self) -> List[Tuple[int, Dict[str, Any]]]:
        return self.service.list_keys()

    def resolve_key_path(self, ssh_key_path: Union[str, Path]) -> Path:
        return self.service.resolve_key_path(ssh_key_path)

    def register_key(
        self,
        ssh_key_path: Union[str, Path],
        alias: str = "",
        sudo_mode: bool = False,
        store: Optional[KeyStore] = None,
    ) -> Dict[str, Any]:
        return self.service.register_key(ssh_key_path, alias, sudo_mode, store)

    def select_key(self, store: KeyStore, selection: str) -> Dict[str, Any]:
        return self.service.select_key(store, selection)

    def clear_agent(self) -> Optional[ExternalCommandError]:
        return self.service.clear_agent()

    def activate_key(self, key: Dict[str, Any]) -> None:
        self.service.activate_key(key)
