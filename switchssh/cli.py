"""Command line interface for SwitchSSH.

Three sub-commands are provided: ``setup`` registers a key interactively,
``switch`` loads a registered key into the SSH agent and ``list`` prints the
registered keys.  Each command loads the key file itself and hands the store
to the controller explicitly.
"""

import argparse
import configparser
import logging
import sys
from typing import Any, Dict, List, Optional

from .agent import AgentSwitcher
from .controllers.key_controller import KeyController
from .errors import (
    ConfigIOError,
    ConfigParseError,
    ExternalCommandError,
    ValidationError,
)
from .settings import Settings, load_settings

NO_KEYS_MESSAGE = "No SSH keys registered. Use 'switchssh setup' to add your first key."


def _setup_logging(settings: Settings) -> None:
    """Send log records to the log file named in the settings.

    Console output is reserved for messages addressed to the user.  If the log
    file cannot be opened, warnings and errors go to standard error instead.
    """
    try:
        handler: logging.Handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    except OSError as exc:
        handler = logging.StreamHandler()
        handler.setLevel(logging.WARNING)
        print(f"Warning: cannot open log file {settings.log_file}: {exc}", file=sys.stderr)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[handler],
        force=True,
    )


def _ask(prompt: str) -> str:
    return input(prompt).strip()


def _input_error(exc: EOFError) -> None:
    print(f"Error reading input: {str(exc) or 'end of input'}", file=sys.stderr)


def _sudo_suffix(key: Dict[str, Any]) -> str:
    return " (sudo)" if key.get("sudo_mode") else ""


def setup_command(controller: KeyController) -> int:
    """Interactively register a new SSH key."""
    logger = logging.getLogger(__name__)
    store = controller.load_store()
    try:
        key_path = _ask("Enter the path to your SSH key file: ")
    except EOFError as exc:
        _input_error(exc)
        return 0
    try:
        controller.resolve_key_path(key_path)
    except ValidationError as exc:
        logger.warning("Setup rejected: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 0

    try:
        alias = _ask("Enter an alias for this key (optional, press Enter to skip): ")
        sudo_answer = _ask("Use sudo mode for this key? (y/N): ")
    except EOFError as exc:
        _input_error(exc)
        return 0
    sudo_mode = sudo_answer.lower() == "y"

    try:
        key = controller.register_key(key_path, alias, sudo_mode, store)
    except ValidationError as exc:
        logger.warning("Setup rejected: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 0
    except ConfigIOError as exc:
        logger.error("Failed to save configuration: %s", exc)
        print(f"Error saving configuration: {exc}", file=sys.stderr)
        return 1

    print(f"Successfully registered SSH key: {key['alias']} ({key['path']})")
    return 0


def switch_command(controller: KeyController) -> int:
    """Select a registered key and load it into the SSH agent."""
    logger = logging.getLogger(__name__)
    store = controller.load_store()
    if not len(store):
        print(NO_KEYS_MESSAGE)
        return 0

    print("Available SSH keys:")
    for number, key in store.list():
        print(f"{number}. {key['alias']}{_sudo_suffix(key)} - {key['path']}")

    try:
        selection = _ask("\nSelect a key (enter number): ")
    except EOFError as exc:
        _input_error(exc)
        return 0
    try:
        key = controller.select_key(store, selection)
    except ValidationError as exc:
        logger.warning("Rejected selection %r", selection)
        print(str(exc), file=sys.stderr)
        return 0

    print("Clearing existing SSH keys...")
    clear_error = controller.clear_agent()
    if clear_error is not None:
        print(f"Warning: Could not clear existing SSH keys: {clear_error}", file=sys.stderr)

    print(f"Adding SSH key: {key['alias']}")
    try:
        controller.activate_key(key)
    except ExternalCommandError as exc:
        print(f"Error adding SSH key: {exc}", file=sys.stderr)
        return 1

    print(f"Successfully switched to SSH key: {key['alias']}")
    return 0


def list_command(controller: KeyController) -> int:
    """Print every registered key with its display number."""
    keys = controller.list_keys()
    if not keys:
        print(NO_KEYS_MESSAGE)
        return 0

    print("Registered SSH keys:")
    print("====================")
    for number, key in keys:
        print(f"{number}. {key['alias']}{_sudo_suffix(key)}")
        print(f"   Path: {key['path']}")
        print()
    return 0


COMMANDS = {
    "setup": (setup_command, "Setup a new SSH key"),
    "switch": (switch_command, "Switch to a different SSH key"),
    "list": (list_command, "List all registered SSH keys"),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="switchssh",
        description="A CLI tool to manage and switch between SSH keys.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True
    for name, (_, help_text) in COMMANDS.items():
        subparsers.add_parser(name, help=help_text, description=help_text + ".")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the ``switchssh`` console script."""
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except (configparser.Error, ValueError) as exc:
        print(f"Error loading settings: {exc}", file=sys.stderr)
        return 1
    _setup_logging(settings)
    logger = logging.getLogger(__name__)
    logger.info("Running '%s' command", args.command)

    switcher = AgentSwitcher(
        add_command=settings.add_command,
        clear_command=settings.clear_command,
        elevation_command=settings.elevation_command,
    )
    controller = KeyController(switcher=switcher)
    command, _ = COMMANDS[args.command]
    try:
        return command(controller)
    except (ConfigIOError, ConfigParseError) as exc:
        logger.error("Failed to load configuration: %s", exc)
        print(f"Error loading configuration: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
