from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from otp_provider.core.otp.types import SUPPORTED_ALGORITHMS, HashAlgorithm

BASE_DIR = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OTP_PROVIDER_",
        env_file=(BASE_DIR / ".env", BASE_DIR / ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    step_seconds: int = Field(default=30, gt=0)
    epoch_origin: int = Field(default=0, ge=0)
    digits: int = Field(default=6, ge=6, le=10)
    algorithm: HashAlgorithm = "sha1"
    validation_window: int = Field(default=1, ge=0)
    secret_bytes: int = Field(default=20, gt=0)
    default_issuer: str = ""

    @field_validator("algorithm", mode="before")
    @classmethod
    def _normalize_algorithm(cls, value: object) -> str:
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "")
            if normalized in SUPPORTED_ALGORITHMS:
                return normalized
            raise ValueError(f"algorithm must be one of {', '.join(SUPPORTED_ALGORITHMS)}")
        raise TypeError("algorithm must be a string")

    @field_validator("default_issuer", mode="before")
    @classmethod
    def _strip_default_issuer(cls, value: object) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        raise TypeError("default_issuer must be a string")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
