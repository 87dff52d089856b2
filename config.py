import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".readcheck"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_PORT = 3001
DEFAULT_SHEET_NAME = "テスト記録"


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() in ("1", "true", "yes")


def load_config() -> Dict[str, Any]:
    """Load config from ~/.readcheck/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        raw = tomllib.load(f)
    return build_config(raw)


def build_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Fill defaults and apply environment overrides to a raw config mapping."""
    config = dict(raw)

    database_cfg = raw.get("database", {})
    config["database"] = {
        "path": Path(os.getenv("DATABASE_PATH") or database_cfg.get("path") or CONFIG_DIR / "readcheck.db"),
    }

    storage_cfg = raw.get("storage", {})
    config["storage"] = {
        "fonts_dir": Path(os.getenv("FONTS_DIR") or storage_cfg.get("fonts_dir") or CONFIG_DIR / "fonts"),
        "uploads_dir": Path(os.getenv("UPLOADS_DIR") or storage_cfg.get("uploads_dir") or CONFIG_DIR / "uploads"),
    }

    admin_cfg = raw.get("admin", {})
    config["admin"] = {
        "password": os.getenv("ADMIN_PASSWORD", admin_cfg.get("password", "")),
    }

    logging_cfg = raw.get("logging", {})
    config["logging"] = {
        "level": os.getenv("LOG_LEVEL", logging_cfg.get("level", "INFO")).upper(),
    }

    server_cfg = raw.get("server", {})
    config["server"] = {
        "host": os.getenv("HOST", server_cfg.get("host", "127.0.0.1")),
        "port": int(os.getenv("PORT", server_cfg.get("port", DEFAULT_PORT))),
    }

    seed_cfg = raw.get("seed", {})
    config["seed"] = {
        "sample_data": _env_bool("SEED_SAMPLE_DATA", seed_cfg.get("sample_data", True)),
    }

    firebase_cfg = raw.get("firebase", {})
    config["firebase"] = {
        "service_account": os.getenv("FIREBASE_SERVICE_ACCOUNT", firebase_cfg.get("service_account", "")),
        "database_url": os.getenv("FIREBASE_DATABASE_URL", firebase_cfg.get("database_url", "")),
        "collection": firebase_cfg.get("collection", "reading_records"),
    }

    sheets_cfg = raw.get("google_sheets", {})
    # Keys pasted into env vars usually carry escaped newlines
    private_key = os.getenv("GOOGLE_PRIVATE_KEY", sheets_cfg.get("private_key", ""))
    config["google_sheets"] = {
        "service_account_email": os.getenv(
            "GOOGLE_SERVICE_ACCOUNT_EMAIL", sheets_cfg.get("service_account_email", "")
        ),
        "private_key": private_key.replace("\\n", "\n"),
        "sheet_id": os.getenv("GOOGLE_SHEET_ID", sheets_cfg.get("sheet_id", "")),
        "sheet_name": sheets_cfg.get("sheet_name", DEFAULT_SHEET_NAME),
        "timezone": sheets_cfg.get("timezone", "Asia/Tokyo"),
    }
    return config


def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('admin', 'password')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
