from __future__ import annotations

import json
from pathlib import Path

from credentials import CredentialAccessor, SettingsStore
from tests.storage import SETTINGS_KEY, write_local_storage


def test_returns_stored_api_key(configured_credentials: CredentialAccessor) -> None:
    assert configured_credentials.get_key("wavespeed") == "ws-test-key"


def test_unknown_provider_has_no_key(configured_credentials: CredentialAccessor) -> None:
    assert configured_credentials.get_key("replicate") is None


def test_no_store_means_no_key() -> None:
    assert CredentialAccessor(None).get_key("wavespeed") is None
    assert CredentialAccessor(SettingsStore(None)).get_key("wavespeed") is None


def test_missing_store_file_means_no_key(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "does-not-exist.json")
    assert store.available is False
    assert CredentialAccessor(store, SETTINGS_KEY).get_key("wavespeed") is None


def test_corrupt_store_file_means_no_key(storage_path: Path) -> None:
    storage_path.write_text("{not json", encoding="utf-8")
    assert CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY).get_key("wavespeed") is None


def test_unparseable_blob_means_no_key(storage_path: Path) -> None:
    write_local_storage(storage_path, raw_blob="{broken")
    assert CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY).get_key("wavespeed") is None


def test_missing_blob_means_no_key(storage_path: Path) -> None:
    storage_path.write_text(json.dumps({"other-key": "value"}), encoding="utf-8")
    assert CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY).get_key("wavespeed") is None


def test_unexpected_shapes_mean_no_key(storage_path: Path) -> None:
    accessor = CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY)

    for blob in ('"just a string"', '{"providers": []}', '{"providers": {"wavespeed": "key"}}',
                 '{"providers": {"wavespeed": {"apiKey": ""}}}', '{"providers": {"wavespeed": {"apiKey": 42}}}'):
        write_local_storage(storage_path, raw_blob=blob)
        assert accessor.get_key("wavespeed") is None, blob


def test_blob_stored_as_object_is_accepted(storage_path: Path) -> None:
    storage_path.write_text(
        json.dumps({SETTINGS_KEY: {"providers": {"wavespeed": {"apiKey": "obj-key"}}}}),
        encoding="utf-8",
    )
    assert CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY).get_key("wavespeed") == "obj-key"


def test_key_changes_are_picked_up_without_restart(storage_path: Path) -> None:
    accessor = CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY)
    write_local_storage(storage_path, {})
    assert accessor.get_key("wavespeed") is None

    write_local_storage(storage_path, {"wavespeed": {"apiKey": "new-key"}})
    assert accessor.get_key("wavespeed") == "new-key"


def test_deeply_nested_blob_means_no_key(storage_path: Path) -> None:
    write_local_storage(storage_path, raw_blob="[" * 100000 + "]" * 100000)
    assert CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY).get_key("wavespeed") is None


def test_deeply_nested_store_file_means_no_key(storage_path: Path) -> None:
    storage_path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
    assert CredentialAccessor(SettingsStore(storage_path), SETTINGS_KEY).get_key("wavespeed") is None


def test_unusable_store_path_is_unavailable(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / ("x" * 5000))
    assert store.available is False
    assert store.get_item(SETTINGS_KEY) is None
