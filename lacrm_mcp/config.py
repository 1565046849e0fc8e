from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import AuthenticationError


API_KEY_ENV = "LACRM_API_KEY"
CONFIG_FILE_NAME = ".lacrm-config.json"
DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "config" / "server.yaml"

NO_API_KEY_MESSAGE = (
    "No API key found. Set LACRM_API_KEY environment variable or create a config file at "
    '~/.lacrm-config.json with {"apiKey": "your-key"}'
)

logger = logging.getLogger("lacrm_mcp.config")


def load_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"LACRM MCP server config not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping")
    return data


def credential_paths(home: Optional[Path] = None, cwd: Optional[Path] = None) -> List[Path]:
    return [
        (home or Path.home()) / CONFIG_FILE_NAME,
        (cwd or Path.cwd()) / CONFIG_FILE_NAME,
    ]


def _read_api_key_file(path: Path) -> Optional[str]:
    if not path.exists():
        return None
    try:
        # JSON is a subset of YAML, so the same loader reads the credential file
        data = load_config(path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.warning("Failed to read config file %s: %s", path, exc)
        return None
    api_key = data.get("apiKey")
    if isinstance(api_key, str) and api_key.strip():
        return api_key.strip()
    return None


def load_api_key(
    environ: Optional[Dict[str, str]] = None,
    paths: Optional[List[Path]] = None,
) -> str:
    """
    Resolve the LACRM API key.

    Order: LACRM_API_KEY, ~/.lacrm-config.json, ./.lacrm-config.json.
    The first non-empty value wins.
    """
    env = os.environ if environ is None else environ
    api_key = (env.get(API_KEY_ENV) or "").strip()
    if api_key:
        logger.debug("Using API key from environment")
        return api_key

    for path in paths if paths is not None else credential_paths():
        api_key = _read_api_key_file(path)
        if api_key:
            logger.debug("Using API key from %s", path)
            return api_key

    raise AuthenticationError(NO_API_KEY_MESSAGE)


@dataclass
class Settings:
    name: str = "lacrm-mcp"
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 9000
    api_url: str = "https://api.lessannoyingcrm.com/v2/"
    timeouts: Dict[str, float] = field(
        default_factory=lambda: {"connect": 5.0, "read": 30.0, "write": 30.0, "pool": 5.0}
    )

    @classmethod
    def from_mapping(cls, data: Dict[str, Any], environ: Optional[Dict[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        server_cfg = data.get("server", {}) or {}
        api_cfg = data.get("api", {}) or {}
        settings = cls()
        settings.name = str(server_cfg.get("name", settings.name))
        settings.log_level = str(
            env.get("LACRM_MCP_LOG_LEVEL") or server_cfg.get("log_level", settings.log_level)
        ).upper()
        settings.host = env.get("MCP_SERVER_HOST") or str(server_cfg.get("host", settings.host))
        settings.port = int(env.get("MCP_SERVER_PORT") or server_cfg.get("port", settings.port))
        settings.api_url = str(api_cfg.get("url", settings.api_url))
        for key, value in (api_cfg.get("timeout", {}) or {}).items():
            if key in settings.timeouts:
                settings.timeouts[key] = float(value)
        return settings


def load_settings(path: Optional[Path] = None, environ: Optional[Dict[str, str]] = None) -> Settings:
    """Load settings from YAML; a missing default file means defaults."""
    env = os.environ if environ is None else environ
    explicit = path is not None or bool(env.get("LACRM_MCP_CONFIG"))
    config_path = Path(path or env.get("LACRM_MCP_CONFIG") or DEFAULT_SETTINGS_PATH)
    if not config_path.exists() and not explicit:
        return Settings.from_mapping({}, env)
    return Settings.from_mapping(load_config(config_path), env)
