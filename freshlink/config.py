# freshlink/config.py
from __future__ import annotations

import logging
import os

from pydantic import BaseModel

# Load .env locally (safe in prod too)
try:
    from dotenv import load_dotenv

    load_dotenv()
except Exception:
    pass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() not in {"0", "false", "no", ""}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except Exception:
        return default


# -------------------
# Config (env-driven)
# -------------------
class Settings(BaseModel):
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./freshlink.db").strip()

    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_alg: str = os.getenv("JWT_ALG", "HS256")
    jwt_expire_minutes: int = _env_int("JWT_EXPIRE_MIN", 1440)  # default 24h

    # Empty disables remote submission; orders are then created locally only.
    orders_remote_url: str = os.getenv("ORDERS_REMOTE_URL", "").strip()
    remote_timeout_s: float = _env_float("REMOTE_TIMEOUT_S", 10.0)

    seed_demo_users: bool = _env_flag("SEED_DEMO_USERS", "1")
    currency_symbol: str = os.getenv("CURRENCY_SYMBOL", "₹")
    log_level: str = os.getenv("LOG_LEVEL", "INFO").strip().upper()


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
