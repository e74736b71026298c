"""
Configuration management using pydantic-settings.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from utxoview.constants import DEFAULT_MEMPOOL_API_URLS


def get_default_api_url(network: str) -> str:
    try:
        return DEFAULT_MEMPOOL_API_URLS[network]
    except KeyError:
        raise ValueError(f"Unknown network: {network}") from None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: Literal["mainnet", "testnet", "signet", "regtest"] = "mainnet"

    # Empty means "use the mempool.space endpoint for the configured network"
    mempool_api_url: str = ""

    request_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0)
    retry_delay: float = Field(default=0.5, ge=0)
    max_concurrency: int = Field(default=8, ge=1)

    log_level: str = "INFO"

    def get_api_url(self) -> str:
        return self.mempool_api_url.rstrip("/") or get_default_api_url(self.network)


def get_settings() -> Settings:
    return Settings()
