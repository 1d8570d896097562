import configparser
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from switchssh.controllers.key_controller import KeyController
from switchssh.ssh_keys import SSH_KEYS_FILE


def _load_cfg() -> configparser.ConfigParser:
    cfg = configparser.ConfigParser()
    cfg.read(Path(__file__).with_name("ssh_keys_test_config.ini"))
    return cfg


def test_controller_delegates_to_service(monkeypatch):
    cfg = _load_cfg()
    controller = KeyController()
    called = {}

    def fake_register(path, alias="", sudo_mode=False, store=None):
        called["args"] = (path, alias, sudo_mode, store)
        return {"alias": alias}

    monkeypatch.setattr(controller.service, "register_key", fake_register)
    key_path = Path(cfg["key1"]["filename"])
    result = controller.register_key(key_path, cfg["key1"]["alias"], True)
    assert result["alias"] == cfg["key1"]["alias"]
    assert called["args"] == (key_path, cfg["key1"]["alias"], True, None)


def test_controller_activation_delegates_to_service(monkeypatch):
    cfg = _load_cfg()
    controller = KeyController()
    called = []

    monkeypatch.setattr(controller.service, "clear_agent", lambda: called.append("clear"))
    monkeypatch.setattr(
        controller.service, "activate_key", lambda key: called.append(key["alias"])
    )
    controller.clear_agent()
    controller.activate_key({"alias": cfg["key1"]["alias"]})
    assert called == ["clear", cfg["key1"]["alias"]]


def test_controller_lists_keys_from_file(tmp_path):
    cfg = _load_cfg()
    key_path = tmp_path / cfg["key1"]["filename"]
    key_path.touch()
    controller = KeyController(tmp_path / SSH_KEYS_FILE)
    controller.register_key(key_path)
    listed = controller.list_keys()
    assert listed == [(1, {"path": str(key_path), "alias": cfg["key1"]["filename"], "sudo_mode": False})]
