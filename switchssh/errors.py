"""Exception types raised by SwitchSSH.

Every error derives from :class:`SwitchSSHError` so the command line layer can
report it uniformly.  The classes additionally inherit from the matching
built-in exception, which keeps ``except OSError`` or ``except ValueError``
blocks working for callers that do not know about this module.
"""

from typing import Optional, Sequence


class SwitchSSHError(Exception):
    """Base class for all SwitchSSH errors."""


class ConfigIOError(SwitchSSHError, OSError):
    """The key file or its directory could not be created, read or written."""


class ConfigParseError(SwitchSSHError, ValueError):
    """The key file exists but does not contain the expected structure."""


class ValidationError(SwitchSSHError, ValueError):
    """User supplied data was rejected."""


class DuplicateAliasError(ValidationError):
    def __init__(self, alias: str) -> None:
        super().__init__(
            f"Alias '{alias}' already exists. Please choose a different alias."
        )
        self.alias = alias


class KeyFileNotFoundError(ValidationError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__(f"SSH key file not found at {path}")
        self.path = path


class InvalidSelectionError(ValidationError):
    def __init__(self, selection: object = None) -> None:
        super().__init__("Invalid selection. Please enter a valid number.")
        self.selection = selection


class ExternalCommandError(SwitchSSHError):
    """An external command could not be started or exited with failure."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        command = " ".join(self.argv)
        if reason is None:
            reason = f"exit status {returncode}"
        super().__init__(f"'{command}' failed: {reason}")
