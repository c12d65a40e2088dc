"""
Environment-backed settings helpers.

Every setting is read on demand so tests can override it with
`monkeypatch.setenv` without reloading modules.
"""

from __future__ import annotations

import os

DEFAULT_CORS_ORIGINS = ("http://localhost:3000", "http://localhost:8080")


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return raw not in {"0", "false", "False", "no"}


def session_ttl_hours() -> int:
    value = env_int("SESSION_TTL_HOURS", 24)
    return value if value > 0 else 24


def session_cookie_name() -> str:
    return env_str("SESSION_COOKIE_NAME", "session_id")


def session_cookie_secure() -> bool:
    return env_bool("SESSION_COOKIE_SECURE", False)


def upload_dir() -> str:
    return env_str("UPLOAD_DIR", "uploads")


def cors_origins() -> list[str]:
    raw = os.environ.get("CORS_ORIGINS", "").strip()
    if not raw:
        return list(DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
