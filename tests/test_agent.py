"""Tests for the ssh-agent command wrapper."""
import configparser
import logging
from pathlib import Path
import sys
from types import SimpleNamespace

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from switchssh.agent import AgentSwitcher
from switchssh.errors import ExternalCommandError
from switchssh.ssh_keys import make_record


def _load_cfg() -> configparser.ConfigParser:
    cfg = configparser.ConfigParser()
    cfg.read(Path(__file__).with_name("agent_test_config.ini"))
    return cfg


class FakeRunner:
    """Record invoked commands and answer with preset exit codes."""

    def __init__(self, returncodes=None, error=None):
        self.calls = []
        self.kwargs = []
        self.returncodes = dict(returncodes or {})
        self.error = error

    def __call__(self, argv, **kwargs):
        self.calls.append(list(argv))
        self.kwargs.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(returncode=self.returncodes.get(tuple(argv), 0))


def _key(cfg, sudo_mode=False):
    return make_record(cfg["key"]["path"], cfg["key"]["alias"], sudo_mode)


def test_activate_runs_add_with_key_path():
    cfg = _load_cfg()
    runner = FakeRunner()
    AgentSwitcher(runner=runner).activate(_key(cfg))
    assert runner.calls == [cfg["commands"]["add"].split() + [cfg["key"]["path"]]]
    # Streams are inherited so the child can prompt on the terminal
    assert "stdin" not in runner.kwargs[0]
    assert "capture_output" not in runner.kwargs[0]


def test_activate_sudo_key_uses_elevation_wrapper():
    cfg = _load_cfg()
    runner = FakeRunner()
    AgentSwitcher(runner=runner).activate(_key(cfg, sudo_mode=True))
    expected = [cfg["commands"]["elevation"], cfg["commands"]["add"], cfg["key"]["path"]]
    assert runner.calls == [expected]


def test_activate_failure_raises():
    cfg = _load_cfg()
    argv = (cfg["commands"]["elevation"], cfg["commands"]["add"], cfg["key"]["path"])
    failure = cfg["exit_codes"].getint("failure")
    runner = FakeRunner({argv: failure})
    with pytest.raises(ExternalCommandError) as info:
        AgentSwitcher(runner=runner).activate(_key(cfg, sudo_mode=True))
    assert info.value.returncode == failure
    assert info.value.argv == list(argv)


def test_activate_missing_executable_raises():
    cfg = _load_cfg()
    runner = FakeRunner(error=FileNotFoundError("ssh-add"))
    with pytest.raises(ExternalCommandError):
        AgentSwitcher(runner=runner).activate(_key(cfg))


def test_clear_runs_clear_command():
    cfg = _load_cfg()
    runner = FakeRunner()
    assert AgentSwitcher(runner=runner).clear() is None
    assert runner.calls == [cfg["commands"]["clear"].split()]


def test_clear_failure_is_only_a_warning(caplog):
    cfg = _load_cfg()
    failure = cfg["exit_codes"].getint("failure")
    runner = FakeRunner({tuple(cfg["commands"]["clear"].split()): failure})
    with caplog.at_level(logging.WARNING):
        error = AgentSwitcher(runner=runner).clear()
    assert isinstance(error, ExternalCommandError)
    assert error.returncode == failure
    assert "Could not clear existing SSH keys" in caplog.text


def test_clear_missing_executable_is_only_a_warning():
    runner = FakeRunner(error=FileNotFoundError("ssh-add"))
    assert isinstance(AgentSwitcher(runner=runner).clear(), ExternalCommandError)


def test_custom_commands_are_used():
    cfg = _load_cfg()
    runner = FakeRunner()
    switcher = AgentSwitcher(
        add_command=["/opt/bin/ssh-add", "-t", "1d"],
        clear_command=["/opt/bin/ssh-add", "-D"],
        elevation_command=["doas"],
        runner=runner,
    )
    switcher.clear()
    switcher.activate(_key(cfg, sudo_mode=True))
    assert runner.calls == [
        ["/opt/bin/ssh-add", "-D"],
        ["doas", "/opt/bin/ssh-add", "-t", "1d", cfg["key"]["path"]],
    ]
