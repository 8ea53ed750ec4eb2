"""
Configuration package for CDS.
"""

from functools import lru_cache
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    BACKEND: Literal["rpc", "memory"] = "rpc"
    RPC_URL: str = "http://127.0.0.1:8545"
    DEPLOYER_ADDRESS: Optional[str] = None
    BUILD_DIR: str = "build/contracts"
    GAS_LIMIT: Optional[int] = None
    CONFIRMATION_TIMEOUT: float = 120.0
    POLL_INTERVAL: float = 1.0
    RECORD_FILE: Optional[str] = None
    LOG_LEVEL: str = "INFO"
    LIBRARY_LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
