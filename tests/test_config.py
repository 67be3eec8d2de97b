import json

import pytest

from tagger.lib.config import DEFAULT_DATABASE, TaggerConfig, load_config
from tagger.lib.errors import ConfigError


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(str(tmp_path / "missing.json"))
    assert cfg == TaggerConfig()
    assert cfg.database == DEFAULT_DATABASE
    assert cfg.journal_mode == "WAL"


def test_loads_values_and_ignores_unknown_keys(tmp_path):
    p = tmp_path / "config.json"
    p.write_text(json.dumps({"database": "tags.db", "journal_mode": "delete", "echo": True, "theme": "dark"}))
    cfg = load_config(str(p))
    assert cfg.database == "tags.db"
    assert cfg.journal_mode == "DELETE"
    assert cfg.echo is True
    assert cfg.migrations_location is None


def test_config_json_in_cwd_is_used(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({"database": "cwd.db"}))
    monkeypatch.chdir(tmp_path)
    assert load_config().database == "cwd.db"


def test_no_config_in_cwd_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config() == TaggerConfig()


@pytest.mark.parametrize("content", [
    "{not json",
    json.dumps(["database"]),
    json.dumps({"journal_mode": "sideways"}),
    json.dumps({"database": ""}),
    json.dumps({"echo": "false"}),
    json.dumps({"echo": 1}),
])
def test_bad_config_raises(tmp_path, content):
    p = tmp_path / "config.json"
    p.write_text(content)
    with pytest.raises(ConfigError):
        load_config(str(p))
