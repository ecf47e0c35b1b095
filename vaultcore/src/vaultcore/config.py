"""
Configuration management using pydantic-settings.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vaultcore.constants import LOW_VALUE_UTXO_THRESHOLD, MAX_DEPOSIT_COUNT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VAULTCORE_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    dust_threshold: int = Field(default=LOW_VALUE_UTXO_THRESHOLD, ge=0)
    max_step_count: int = Field(default=10, ge=2)
    max_deposit_count: int = Field(default=MAX_DEPOSIT_COUNT, ge=1, le=30)

    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()
