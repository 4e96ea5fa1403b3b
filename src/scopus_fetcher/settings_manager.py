"""
Low-level settings management for the fetcher.

Settings (a remembered API key and the UI mode) are stored encrypted with a
Fernet key kept beside them.
"""

import json
import os
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken

from .config import API_KEY_ENV

CONFIG_DIR = Path.home() / ".scopus_fetcher"

UI_MODES = ["research", "debug"]
DEFAULT_UI_MODE = "research"


def config_file() -> Path:
    return CONFIG_DIR / "settings.json"


def key_file() -> Path:
    return CONFIG_DIR / "key.key"


def log_file() -> Path:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR / "app.log"


def get_key() -> bytes:
    path = key_file()
    if path.exists():
        return path.read_bytes()
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    key = Fernet.generate_key()
    path.write_bytes(key)
    return key


def read_config_raw() -> dict | None:
    path = config_file()
    if not path.exists() or not key_file().exists():
        return None
    try:
        decrypted_data = Fernet(get_key()).decrypt(path.read_bytes())
        return json.loads(decrypted_data)
    except (InvalidToken, ValueError, OSError):
        return None


def write_config_raw(cfg: dict) -> None:
    encrypted_data = Fernet(get_key()).encrypt(json.dumps(cfg, indent=2).encode())
    config_file().write_bytes(encrypted_data)


def delete_config_raw() -> None:
    for path in (config_file(), key_file()):
        if path.exists():
            path.unlink()


def default_api_key(cfg: dict | None) -> str:
    """A remembered key wins over the environment."""
    return (cfg or {}).get("api_key") or os.getenv(API_KEY_ENV, "")
