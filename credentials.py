"""Read provider API keys from the front end's local key/value storage.

The front end keeps its provider settings as a single JSON blob under one
storage key. Locally that storage is a JSON file mapping storage keys to
string values, so the same blob can be read here:

    {"node-banana-provider-settings": "{\"providers\": {\"wavespeed\": {\"apiKey\": \"...\"}}}"}

A missing key is not an error. It means the provider is not configured, and
every failure along the way collapses to ``None``.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_KEY = "node-banana-provider-settings"


class SettingsStore:
    """Read-only view over a JSON key/value file.

    Usage:
        store = SettingsStore("~/.node-banana/local-storage.json")
        blob = store.get_item("node-banana-provider-settings")
    """

    def __init__(self, path: str | Path | None):
        self.path = Path(path).expanduser() if path else None

    @property
    def available(self) -> bool:
        if self.path is None:
            return False
        try:
            return self.path.is_file()
        except OSError:
            return False

    def get_item(self, key: str) -> str | None:
        """Return the raw string stored under ``key``, or None."""
        if not self.available:
            return None

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as e:
            logger.debug("Could not read settings store %s: %s", self.path, e)
            return None

        if not isinstance(data, dict):
            return None

        value = data.get(key)
        if value is None:
            return None
        if isinstance(value, str):
            return value
        # Tolerate stores that hold the blob as a nested object instead of a string
        return json.dumps(value)


class CredentialAccessor:
    """Look up ``providers[<id>].apiKey`` inside the provider settings blob."""

    def __init__(self, store: SettingsStore | None, settings_key: str = DEFAULT_SETTINGS_KEY):
        self.store = store
        self.settings_key = settings_key

    def get_key(self, provider_id: str) -> str | None:
        if self.store is None:
            return None

        blob = self.store.get_item(self.settings_key)
        if not blob:
            return None

        try:
            parsed = json.loads(blob)
        except (ValueError, RecursionError):
            return None

        node = parsed
        for part in ("providers", provider_id, "apiKey"):
            if not isinstance(node, dict):
                return None
            node = node.get(part)

        if not isinstance(node, str) or not node:
            return None
        return node
