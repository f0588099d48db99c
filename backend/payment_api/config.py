import os
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGIN = "https://mahndi.vercel.app"
DEFAULT_CORS_METHODS = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
MIN_BCRYPT_ROUNDS = 4


def _read_int(name: str, default: int) -> int:
    raw_value = os.getenv(name, str(default))
    try:
        return int(raw_value)
    except (TypeError, ValueError):
        return default


def _read_bool(name: str, default: bool = False) -> bool:
    raw_value = (os.getenv(name) or "").strip().lower()
    if not raw_value:
        return default
    return raw_value in {"1", "true", "yes", "on"}


def load_config(overrides: Optional[Dict] = None) -> Dict[str, object]:
    """Read service settings from the environment, then apply ``overrides``."""
    cors_methods = [
        method.strip().upper()
        for method in (os.getenv("CORS_METHODS") or DEFAULT_CORS_METHODS).split(",")
        if method.strip()
    ]

    config: Dict[str, object] = {
        "MONGO_URI": os.getenv("MONGO_URI", "mongodb://localhost:27017/authdb"),
        "PAYMENT_DB_URI": os.getenv(
            "PAYMENT_DB_URI", "mongodb://localhost:27017/paymentdb"
        ),
        "AUTH_DB_NAME": "authdb",
        "PAYMENT_DB_NAME": "paymentdb",
        "PORT": _read_int("PORT", 5000),
        "CORS_ORIGIN": (os.getenv("CORS_ORIGIN") or DEFAULT_CORS_ORIGIN).strip(),
        "CORS_METHODS": cors_methods,
        "BCRYPT_ROUNDS": max(MIN_BCRYPT_ROUNDS, _read_int("BCRYPT_ROUNDS", 10)),
        "ENFORCE_STATUS_ORDER": _read_bool("ENFORCE_STATUS_ORDER"),
        "LOG_LEVEL": (os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    }
    if overrides:
        config.update(overrides)
    return config
