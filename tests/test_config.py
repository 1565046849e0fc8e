from __future__ import annotations

import json
from pathlib import Path

import pytest

from lacrm_mcp.config import Settings, load_api_key, load_config, load_settings
from lacrm_mcp.errors import AuthenticationError


def _write(path: Path, data) -> Path:
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


def test_environment_wins(tmp_path: Path) -> None:
    home = _write(tmp_path / "home.json", {"apiKey": "from-file"})
    assert load_api_key({"LACRM_API_KEY": " env-key "}, [home]) == "env-key"


def test_home_file_before_cwd_file(tmp_path: Path) -> None:
    home = _write(tmp_path / "home.json", {"apiKey": "home-key"})
    cwd = _write(tmp_path / "cwd.json", {"apiKey": "cwd-key"})
    assert load_api_key({}, [home, cwd]) == "home-key"


def test_invalid_file_skipped(tmp_path: Path) -> None:
    broken = _write(tmp_path / "broken.json", "[1, 2")
    cwd = _write(tmp_path / "cwd.json", {"apiKey": "cwd-key"})
    assert load_api_key({}, [broken, cwd]) == "cwd-key"


def test_empty_values_skipped(tmp_path: Path) -> None:
    empty = _write(tmp_path / "empty.json", {"apiKey": ""})
    with pytest.raises(AuthenticationError) as exc_info:
        load_api_key({"LACRM_API_KEY": ""}, [empty, tmp_path / "missing.json"])
    assert "~/.lacrm-config.json" in str(exc_info.value)


def test_load_config_requires_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path / "list.yaml", "- a\n- b\n")
    with pytest.raises(ValueError):
        load_config(path)


def test_load_config_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_settings_from_yaml_and_env(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "server.yaml",
        "server:\n  name: crm\n  log_level: debug\n  port: 8100\napi:\n  timeout:\n    read: 12\n",
    )
    settings = load_settings(path, environ={"MCP_SERVER_PORT": "9100"})
    assert settings.name == "crm"
    assert settings.log_level == "DEBUG"
    assert settings.port == 9100
    assert settings.timeouts["read"] == 12.0
    assert settings.timeouts["connect"] == 5.0


def test_missing_default_settings_file_uses_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr("lacrm_mcp.config.DEFAULT_SETTINGS_PATH", tmp_path / "absent.yaml")
    settings = load_settings(environ={})
    assert settings == Settings()
