# config.py
import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

from errors import ConfigError

BACKENDS = ("firestore", "rtdb")


# -------------------------------------------------------
# RESOURCE PATH FIX (supports PyInstaller .exe)
# -------------------------------------------------------
def resource_path(filename):
    """
    Get absolute path to a bundled resource.
    Works for development (.py) AND when compiled into .exe.
    """
    if os.path.isabs(filename):
        return filename
    if hasattr(sys, "_MEIPASS"):
        # PyInstaller temp folder
        return os.path.join(sys._MEIPASS, filename)
    return os.path.join(os.path.abspath("."), filename)


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    service_account_path: str = "firebase_key.json"
    backend: str = "firestore"
    database_url: str = ""
    users_collection: str = "users"
    complaints_collection: str = "complaints"
    theme: str = "cosmo"
    log_level: str = "INFO"


def load_settings(environ=None, dotenv=True) -> Settings:
    """Read settings from the environment (and .env, unless told not to)."""
    if environ is None:
        if dotenv:
            load_dotenv()
        environ = os.environ

    backend = environ.get("CRTS_STORE_BACKEND", "firestore").strip().lower()
    if backend not in BACKENDS:
        raise ConfigError(f"CRTS_STORE_BACKEND must be one of {', '.join(BACKENDS)}, got {backend!r}")

    database_url = environ.get("FIREBASE_DATABASE_URL", "").strip()
    if backend == "rtdb" and not database_url:
        raise ConfigError("FIREBASE_DATABASE_URL is required for the rtdb backend")

    log_level = environ.get("CRTS_LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"Unknown log level {log_level!r}")

    return Settings(
        api_key=environ.get("FIREBASE_API_KEY", "").strip(),
        service_account_path=resource_path(environ.get("FIREBASE_SERVICE_ACCOUNT", "firebase_key.json")),
        backend=backend,
        database_url=database_url,
        users_collection=environ.get("CRTS_USERS_COLLECTION", "users"),
        complaints_collection=environ.get("CRTS_COMPLAINTS_COLLECTION", "complaints"),
        theme=environ.get("CRTS_THEME", "cosmo"),
        log_level=log_level,
    )
