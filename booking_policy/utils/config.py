"""Process settings resolved from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_POLICY_CONFIG_PATH = PROJECT_ROOT / "config" / "booking_policy.json"


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    host: str
    port: int
    policy_config_path: Path
    admin_token: Optional[str]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process; call ``cache_clear()`` to re-read."""
    return Settings(
        app_name=os.getenv("APP_NAME", "Booking Policy Service"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("APP_HOST", "127.0.0.1"),
        port=_env_int("APP_PORT", 8000),
        policy_config_path=Path(
            os.getenv("BOOKING_POLICY_CONFIG", str(DEFAULT_POLICY_CONFIG_PATH))
        ),
        admin_token=os.getenv("ADMIN_TOKEN") or None,
    )
