"""Helpers for driving the SSH agent through ``ssh-add``.

The agent is treated as an opaque external program: commands are started with
:func:`subprocess.run`, inherit the terminal streams of this process, and only
their exit status is inspected.
"""

import logging
import subprocess
from typing import Any, Callable, Dict, List, Optional, Sequence

from .errors import ExternalCommandError
from .settings import (
    DEFAULT_ADD_COMMAND,
    DEFAULT_CLEAR_COMMAND,
    DEFAULT_ELEVATION_COMMAND,
)


class AgentSwitcher:
    """Replace the keys held by the SSH agent with a single registered key."""

    def __init__(
        self,
        add_command: Optional[Sequence[str]] = None,
        clear_command: Optional[Sequence[str]] = None,
        elevation_command: Optional[Sequence[str]] = None,
        runner: Optional[Callable[..., Any]] = None,
    ) -> None:
        """Create the switcher.

        Parameters
        ----------
        add_command: sequence of str, optional
            Command prefix used to load a key; the key path is appended.
        clear_command: sequence of str, optional
            Command removing every identity from the agent.
        elevation_command: sequence of str, optional
            Wrapper placed in front of ``add_command`` for sudo-mode keys.
        runner: callable, optional
            Replacement for :func:`subprocess.run`, used by tests.
        """
        self.add_command = list(add_command or [DEFAULT_ADD_COMMAND])
        self.clear_command = list(clear_command or DEFAULT_CLEAR_COMMAND.split())
        self.elevation_command = list(elevation_command or [DEFAULT_ELEVATION_COMMAND])
        self.runner = runner or subprocess.run
        self.logger = logging.getLogger(__name__)

    def _run(self, argv: List[str]) -> int:
        self.logger.info("Running %s", " ".join(argv))
        try:
            result = self.runner(argv, check=False)
        except OSError as exc:
            raise ExternalCommandError(argv, reason=str(exc)) from exc
        self.logger.info("%s exited with status %s", argv[0], result.returncode)
        return result.returncode

    def add_argv(self, key: Dict[str, Any]) -> List[str]:
        argv = self.add_command + [key["path"]]
        if key.get("sudo_mode"):
            argv = self.elevation_command + argv
        return argv

    def clear(self) -> Optional[ExternalCommandError]:
        """Remove all identities from the agent.

        Clearing is best effort: a failure is logged and returned instead of
        raised so the caller can still activate the selected key.
        """
        argv = list(self.clear_command)
        try:
            returncode = self._run(argv)
        except ExternalCommandError as exc:
            self.logger.warning("Could not clear existing SSH keys: %s", exc)
            return exc
        if returncode != 0:
            error = ExternalCommandError(argv, returncode)
            self.logger.warning("Could not clear existing SSH keys: %s", error)
            return error
        return None

    def activate(self, key: Dict[str, Any]) -> None:
        """Load ``key`` into the agent, raising :class:`ExternalCommandError` on failure."""
        argv = self.add_argv(key)
        returncode = self._run(argv)
        if returncode != 0:
            error = ExternalCommandError(argv, returncode)
            self.logger.error("Failed to add SSH key '%s': %s", key["alias"], error)
            raise error
        self.logger.info("SSH key '%s' loaded into agent", key["alias"])

