"""3-layer configuration system for MailQC.

Loads and merges configuration from:
1. Default settings (built-in)
2. Project config (.mailqc/config.yaml)
3. CLI parameters (override)
"""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Optional

import yaml

from ..models.zammad import ZammadSettings
from ..storage.settings import SettingsRepository
from ..storage.store import JsonFileStore
from ..utils.log import get_logger

logger = get_logger(__name__)

CONFIG_DIR = ".mailqc"

DEFAULT_CONFIG: dict = {
    "project": {
        "name": "",
        "version": "1.0.0",
    },
    "storage": {
        "path": f"{CONFIG_DIR}/storage",
    },
    "reviewer": {
        "id": "reviewer",
    },
    "scoring": {
        "grammar_delay_seconds": 0,
        "low_performer_threshold": 7,
    },
    "zammad": {
        "api_url": "",
        "api_token_env": "ZAMMAD_API_TOKEN",
        "timeout_seconds": 30,
    },
}


def deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts. Arrays are replaced, not merged."""
    result = dict(base)
    for key, value in override.items():
        base_value = result.get(key)
        if isinstance(base_value, dict) and isinstance(value, dict):
            result[key] = deep_merge(base_value, value)
        else:
            result[key] = value
    return result


def load_project_config(project_path: Path) -> dict:
    """Load project configuration from .mailqc/config.yaml."""
    config_path = project_path / CONFIG_DIR / "config.yaml"
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_text(encoding="utf-8-sig")  # utf-8-sig strips BOM
        data = yaml.safe_load(content) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be a mapping", config_path)
        return {}
    return data


def get_effective_config(project_path: Path, cli_overrides: Optional[dict] = None) -> dict:
    """Get the fully resolved configuration for a command."""
    config = copy.deepcopy(DEFAULT_CONFIG)

    project_config = load_project_config(project_path)
    if project_config:
        config = deep_merge(config, project_config)

    if cli_overrides:
        config = deep_merge(config, cli_overrides)

    config["_project_path"] = str(project_path)
    return config


def write_default_config(project_path: Path, name: str = "") -> Path:
    """Create .mailqc/config.yaml and the storage directory if missing."""
    config_dir = project_path / CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)

    config = copy.deepcopy(DEFAULT_CONFIG)
    config["project"]["name"] = name or project_path.resolve().name
    config_path = config_dir / "config.yaml"
    if not config_path.exists():
        config_path.write_text(
            yaml.safe_dump(config, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )

    storage_path(config, project_path).mkdir(parents=True, exist_ok=True)
    return config_path


def storage_path(config: dict, project_path: Path) -> Path:
    path = Path((config.get("storage") or {}).get("path") or DEFAULT_CONFIG["storage"]["path"])
    return path if path.is_absolute() else project_path / path


def open_store(config: dict, project_path: Path) -> JsonFileStore:
    return JsonFileStore(storage_path(config, project_path))


def resolve_zammad_settings(config: dict, settings: SettingsRepository) -> ZammadSettings:
    """Combine stored connection settings with config and the token env var.

    Stored settings win over config; the environment variable is only used
    when no token was stored.
    """
    zammad = config.get("zammad") or {}
    stored = settings.get_settings("zammad") or {}

    api_url = stored.get("apiUrl") or zammad.get("api_url") or ""
    api_token = stored.get("apiToken") or ""
    if not api_token:
        api_token = os.environ.get(zammad.get("api_token_env") or "ZAMMAD_API_TOKEN", "")

    return ZammadSettings(
        api_url=api_url,
        api_token=api_token,
        timeout_seconds=zammad.get("timeout_seconds", 30),
    )
