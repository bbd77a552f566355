import os

import pytest

from config import Settings, load_settings, resource_path
from errors import ConfigError


def test_defaults():
    s = load_settings({})
    assert s.backend == "firestore"
    assert s.users_collection == "users"
    assert s.complaints_collection == "complaints"
    assert s.theme == "cosmo"
    assert s.log_level == "INFO"
    assert s.service_account_path == os.path.join(os.path.abspath("."), "firebase_key.json")


def test_overrides():
    s = load_settings({
        "FIREBASE_API_KEY": " key ",
        "FIREBASE_SERVICE_ACCOUNT": "/etc/crts/key.json",
        "CRTS_STORE_BACKEND": "RTDB",
        "FIREBASE_DATABASE_URL": "https://crts.firebaseio.com",
        "CRTS_COMPLAINTS_COLLECTION": "railway_complaints",
        "CRTS_LOG_LEVEL": "debug",
    })
    assert s == Settings(
        api_key="key",
        service_account_path="/etc/crts/key.json",
        backend="rtdb",
        database_url="https://crts.firebaseio.com",
        complaints_collection="railway_complaints",
        log_level="DEBUG",
    )


def test_rtdb_needs_url():
    with pytest.raises(ConfigError):
        load_settings({"CRTS_STORE_BACKEND": "rtdb"})


def test_unknown_backend():
    with pytest.raises(ConfigError):
        load_settings({"CRTS_STORE_BACKEND": "mongo"})


def test_unknown_log_level():
    with pytest.raises(ConfigError):
        load_settings({"CRTS_LOG_LEVEL": "chatty"})


def test_resource_path_prefers_bundle_dir(monkeypatch):
    monkeypatch.setattr("sys._MEIPASS", "/tmp/bundle", raising=False)
    assert resource_path("firebase_key.json") == os.path.join("/tmp/bundle", "firebase_key.json")
