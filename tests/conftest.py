from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from credentials import CredentialAccessor, SettingsStore
from tests.storage import SETTINGS_KEY, write_local_storage


@pytest.fixture
def storage_path(tmp_path: Path) -> Path:
    return tmp_path / "local-storage.json"


@pytest.fixture
def configured_credentials(storage_path: Path) -> CredentialAccessor:
    write_local_storage(storage_path, {"wavespeed": {"apiKey": "ws-test-key"}})
    return CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY)


@pytest.fixture
def unconfigured_credentials(storage_path: Path) -> CredentialAccessor:
    write_local_storage(storage_path, {})
    return CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY)


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable):
        self.requests: list[httpx.Request] = []

        async def recording_handler(request: httpx.Request):
            self.requests.append(request)
            result = handler(request)
            if hasattr(result, "__await__"):
                result = await result
            return result

        super().__init__(recording_handler)


@pytest.fixture
def recording_transport() -> Callable[[Callable], RecordingTransport]:
    return RecordingTransport
