"""Environment-backed runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_ENV_FILE = _PROJECT_ROOT / ".env"

_DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


def _parse_positive_int(name: str, raw_value: str | None, default: int) -> int:
    """Parse integer env values such as token lifetimes."""
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        value = int(raw_value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer when set") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def _parse_origins(raw_value: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw_value.split(",") if origin.strip())


def _load_env_file(path: Path) -> None:
    """Populate process env vars from .env when present."""
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip("'\"")
        if key:
            os.environ.setdefault(key, value)


@dataclass(frozen=True)
class Settings:
    JWT_SECRET: str = "showcase-dev-secret"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_HOURS: int = 24
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    CORS_ALLOW_ORIGINS: tuple[str, ...] = _parse_origins(_DEFAULT_CORS_ORIGINS)
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # FRONTEND_URL is the single-origin form used by older deployments.
        raw_origins = os.getenv("CORS_ALLOW_ORIGINS") or os.getenv("FRONTEND_URL") or _DEFAULT_CORS_ORIGINS
        return cls(
            JWT_SECRET=os.getenv("JWT_SECRET", "showcase-dev-secret"),
            JWT_ALGORITHM=os.getenv("JWT_ALGORITHM", "HS256"),
            JWT_EXPIRES_HOURS=_parse_positive_int(
                "JWT_EXPIRES_HOURS", os.getenv("JWT_EXPIRES_HOURS"), 24
            ),
            DEFAULT_ADMIN_PASSWORD=os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123"),
            CORS_ALLOW_ORIGINS=_parse_origins(raw_origins),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


@lru_cache
def get_settings() -> Settings:
    _load_env_file(_ENV_FILE)
    return Settings.from_env()
