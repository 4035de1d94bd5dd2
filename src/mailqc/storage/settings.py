"""Namespaced application settings."""

from __future__ import annotations

from typing import Optional

from ..utils.log import get_logger
from .store import KeyValueStore, read_json, write_json

logger = get_logger(__name__)

SETTINGS_PREFIX = "app_settings_"


class SettingsRepository:
    def __init__(self, store: KeyValueStore):
        self.store = store

    def get_settings(self, namespace: str) -> Optional[dict]:
        data = read_json(self.store, f"{SETTINGS_PREFIX}{namespace}", None)
        if data is not None and not isinstance(data, dict):
            logger.error("Settings for %s are not an object", namespace)
            return None
        return data

    def save_settings(self, namespace: str, settings: dict) -> bool:
        return write_json(self.store, f"{SETTINGS_PREFIX}{namespace}", settings)
