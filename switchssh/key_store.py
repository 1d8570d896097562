import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .errors import DuplicateAliasError, InvalidSelectionError
from .ssh_keys import default_keys_file, load_keys, make_record, save_keys


class KeyStore:
    """Ordered collection of registered SSH keys backed by the key file.

    Records keep their insertion order; the 1-based position of a record is
    both its display number and the value accepted by :meth:`select`.  Alias
    uniqueness is checked whenever a record is added.
    """

    def __init__(
        self,
        keys: Optional[Iterable[Dict[str, Any]]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.file_path = Path(file_path) if file_path is not None else default_keys_file()
        self.keys: List[Dict[str, Any]] = list(keys or [])
        self.logger = logging.getLogger(__name__)

    @classmethod
    def load(cls, file_path: Optional[Union[str, Path]] = None) -> "KeyStore":
        """Read the key file, returning an empty store when it is missing."""
        path = Path(file_path) if file_path is not None else default_keys_file()
        return cls(load_keys(path), path)

    def __len__(self) -> int:
        return len(self.keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyStore):
            return NotImplemented
        return self.keys == other.keys

    def add(self, path: str, alias: str = "", sudo_mode: bool = False) -> Dict[str, Any]:
        """Append a record, defaulting ``alias`` to the base name of ``path``."""
        if not alias:
            alias = os.path.basename(path)
        if any(k["alias"] == alias for k in self.keys):
            raise DuplicateAliasError(alias)
        record = make_record(path, alias, sudo_mode)
        self.keys.append(record)
        self.logger.info("SSH key '%s' added for %s", alias, path)
        return record

    def list(self) -> List[Tuple[int, Dict[str, Any]]]:
        return list(enumerate(self.keys, start=1))

    def select(self, ordinal: int) -> Dict[str, Any]:
        if isinstance(ordinal, bool) or not 1 <= ordinal <= len(self.keys):
            raise InvalidSelectionError(ordinal)
        return self.keys[ordinal - 1]

    def save(self) -> None:
        save_keys(self.keys, self.file_path)
