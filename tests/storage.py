"""Helpers for writing local-storage style settings files in tests."""

from __future__ import annotations

import json
from pathlib import Path

SETTINGS_KEY = "node-banana-provider-settings"


def write_local_storage(path: Path, providers: dict | None = None, raw_blob: str | None = None) -> Path:
    """Write a local-storage style JSON file holding the provider settings blob."""
    blob = raw_blob if raw_blob is not None else json.dumps({"providers": providers or {}})
    path.write_text(json.dumps({SETTINGS_KEY: blob}), encoding="utf-8")
    return path
