"""
Settings: environment-driven configuration.

    MEDICART_API_BASE_URL=https://gateway.example.com
    MEDICART_COMPENSATION=all_on_failure
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEDICART_", extra="ignore")

    # API gateway; routes to the cart/orders and payment services
    api_base_url: str = "http://localhost:8080"
    # None keeps httpx's own default
    request_timeout: float | None = None

    log_level: str = "INFO"
    log_json: bool = False

    # What to do with a created order whose payment failed
    compensation: Literal["skip", "all_on_failure"] = "skip"

    # 401s on these paths are expected and not reported as an expired session
    public_paths: tuple[str, ...] = ("/medicines", "/batches", "/auth")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


__all__ = ("Settings", "get_settings")
