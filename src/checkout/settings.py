"""Runtime settings for the checkout service.

Collaborator endpoints and checkout tuning knobs come from the environment
(optionally a ``.env`` file next to the repository root). Persistence settings
live in ``domain.toml`` and are owned by Protean.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[2] / ".env")


def _get_optional(name: str) -> str | None:
    value = os.getenv(name, "").strip()
    return value or None


def _get_float(name: str, fallback: float) -> float:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        return float(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw_value!r}") from exc


def _get_int(name: str, fallback: int, minimum: int = 1) -> int:
    raw_value = os.getenv(name)
    if not raw_value:
        return fallback
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw_value!r}") from exc
    if value < minimum:
        raise RuntimeError(f"Environment variable {name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    identity_service_url: str | None
    cart_service_url: str | None
    catalog_service_url: str | None
    upstream_timeout_seconds: float = 5.0
    checkout_lock_mode: str = "wait"
    checkout_lock_timeout_seconds: float = 10.0
    cart_clear_attempts: int = 2
    price_lookup_workers: int = 4
    database_connect_timeout_seconds: float = 5.0
    database_statement_timeout_seconds: float = 5.0

    @classmethod
    def from_env(cls) -> "Settings":
        lock_mode = os.getenv("CHECKOUT_LOCK_MODE", "wait").strip().lower()
        if lock_mode not in ("wait", "reject"):
            raise RuntimeError(f"CHECKOUT_LOCK_MODE must be 'wait' or 'reject', got {lock_mode!r}")

        return cls(
            identity_service_url=_get_optional("IDENTITY_SERVICE_URL"),
            cart_service_url=_get_optional("CART_SERVICE_URL"),
            catalog_service_url=_get_optional("CATALOG_SERVICE_URL"),
            upstream_timeout_seconds=_get_float("UPSTREAM_TIMEOUT_SECONDS", 5.0),
            checkout_lock_mode=lock_mode,
            checkout_lock_timeout_seconds=_get_float("CHECKOUT_LOCK_TIMEOUT_SECONDS", 10.0),
            cart_clear_attempts=_get_int("CART_CLEAR_ATTEMPTS", 2),
            price_lookup_workers=_get_int("PRICE_LOOKUP_WORKERS", 4),
            database_connect_timeout_seconds=_get_float("DATABASE_CONNECT_TIMEOUT_SECONDS", 5.0),
            database_statement_timeout_seconds=_get_float("DATABASE_STATEMENT_TIMEOUT_SECONDS", 5.0),
        )


settings = Settings.from_env()
