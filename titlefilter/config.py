"""Centralised, env-driven configuration using pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """All tunables are loaded from environment variables (or .env file)."""

    # ── Script conversion (OpenCC config names) ─────────────────────────────
    variant_a_config: str = Field(default="s2twp", alias="VARIANT_A_CONFIG")
    variant_b_config: str = Field(default="tw2s", alias="VARIANT_B_CONFIG")

    # ── Filtering pass ──────────────────────────────────────────────────────
    variant_cache: bool = Field(
        default=True,
        alias="VARIANT_CACHE",
        description="Reuse variant sets for repeated strings within one pass.",
    )
    debounce_ms: int = Field(
        default=300,
        alias="DEBOUNCE_MS",
        description="Quiet period front ends should wait before re-filtering.",
    )

    # ── Logging ─────────────────────────────────────────────────────────────
    log_path: str = Field(default="./logs/filter.log", alias="LOG_PATH")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "populate_by_name": True,
        "extra": "ignore",
    }


# Module-level singleton – import this everywhere
settings = Settings()
