from __future__ import annotations

import json
import logging

import pytest

from noteid.config import NoteIDConfig, init_config, load_config, save_config


def test_defaults_when_missing(vault_root):
    cfg = load_config(vault_root)
    assert cfg.root == vault_root.resolve()
    assert cfg.id_key == "id"
    assert cfg.ignore_file_regex == ""
    assert cfg.ignore_patterns == []


def test_save_and_load(vault_root):
    cfg = NoteIDConfig(root=vault_root, id_key="uid", ignore_file_regex="^templates/\n\\.png$")
    path = save_config(cfg)
    assert path == vault_root / ".noteid" / "settings.json"
    assert json.loads(path.read_text()) == {"id_key": "uid", "ignore_file_regex": "^templates/\n\\.png$"}

    loaded = load_config(vault_root)
    assert loaded.id_key == "uid"
    assert loaded.ignore_patterns == ["^templates/", "\\.png$"]


def test_unknown_keys_survive_save(vault_root):
    (vault_root / ".noteid").mkdir()
    (vault_root / ".noteid" / "settings.json").write_text('{"id_key": "k", "future": 1}')
    cfg = load_config(vault_root)
    cfg.id_key = "k2"
    save_config(cfg)
    raw = json.loads(cfg.settings_path.read_text())
    assert raw == {"future": 1, "id_key": "k2", "ignore_file_regex": ""}


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", ""])
def test_unreadable_settings_fall_back(vault_root, caplog, content):
    (vault_root / ".noteid").mkdir()
    (vault_root / ".noteid" / "settings.json").write_text(content)
    with caplog.at_level(logging.WARNING, logger="noteid.config"):
        cfg = load_config(vault_root)
    assert cfg.id_key == "id"
    assert cfg.ignore_file_regex == ""
    assert "using defaults" in caplog.text


def test_wrong_type_falls_back_per_setting(vault_root):
    (vault_root / ".noteid").mkdir()
    (vault_root / ".noteid" / "settings.json").write_text('{"id_key": 5, "ignore_file_regex": "^x/"}')
    cfg = load_config(vault_root)
    assert cfg.id_key == "id"
    assert cfg.ignore_patterns == ["^x/"]


def test_empty_key_is_kept(vault_root):
    save_config(NoteIDConfig(root=vault_root, id_key=""))
    assert load_config(vault_root).id_key == ""


def test_root_found_by_walking_up(vault_root, monkeypatch):
    init_config(vault_root)
    sub = vault_root / "a" / "b"
    sub.mkdir(parents=True)
    monkeypatch.chdir(sub)
    assert load_config().root == vault_root.resolve()


def test_root_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config().root == tmp_path.resolve()


def test_init_refuses_to_overwrite(vault_root):
    init_config(vault_root)
    with pytest.raises(FileExistsError):
        init_config(vault_root)
