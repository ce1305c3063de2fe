"""Runtime configuration read from the environment."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping

BACKENDS = ("memory", "postgrest")


@dataclass(frozen=True)
class Settings:
    backend: str = "memory"
    store_url: str = ""
    store_key: str = ""
    http_timeout: float = 10.0
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cart_idle_minutes: float = 120.0


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ

    backend = env.get("TABLE_ORDER_BACKEND", "memory").strip().lower()
    if backend not in BACKENDS:
        raise ValueError(f"TABLE_ORDER_BACKEND must be one of: {', '.join(BACKENDS)}")

    settings = Settings(
        backend=backend,
        store_url=env.get("TABLE_ORDER_STORE_URL", "").strip(),
        store_key=env.get("TABLE_ORDER_STORE_KEY", "").strip(),
        http_timeout=_number(env, "TABLE_ORDER_HTTP_TIMEOUT", 10.0, float),
        host=env.get("TABLE_ORDER_HOST", "0.0.0.0"),
        port=_number(env, "TABLE_ORDER_PORT", 8000, int),
        log_level=env.get("TABLE_ORDER_LOG_LEVEL", "INFO").upper(),
        cart_idle_minutes=_number(env, "TABLE_ORDER_CART_IDLE_MINUTES", 120.0, float),
    )

    if not math.isfinite(settings.cart_idle_minutes) or settings.cart_idle_minutes <= 0:
        raise ValueError("TABLE_ORDER_CART_IDLE_MINUTES must be a positive number")
    if settings.backend == "postgrest" and not (settings.store_url and settings.store_key):
        raise ValueError(
            "TABLE_ORDER_STORE_URL and TABLE_ORDER_STORE_KEY are required for the postgrest backend"
        )
    return settings


def _number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
