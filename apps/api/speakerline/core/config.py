"""Application configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 100 * 1024 * 1024


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    provider: Literal["assemblyai", "mock"] = "assemblyai"
    assemblyai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SPEAKERLINE_ASSEMBLYAI_API_KEY", "ASSEMBLY_API_KEY"),
    )
    assemblyai_base_url: str = "https://api.assemblyai.com/v2"
    provider_timeout_seconds: float = Field(default=30.0, gt=0)
    speakers_expected: int = Field(default=2, ge=1)

    upload_dir: Path = Path("uploads")
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES, gt=0)
    retention_ttl_seconds: float = Field(default=3600.0, gt=0)
    sweep_interval_seconds: float = Field(default=0.0, ge=0)

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SPEAKERLINE_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_provider_credential(self) -> "Settings":
        if self.provider == "assemblyai" and not (self.assemblyai_api_key or "").strip():
            raise ConfigurationError(
                "ASSEMBLY_API_KEY (or SPEAKERLINE_ASSEMBLYAI_API_KEY) must be set when provider=assemblyai"
            )
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
