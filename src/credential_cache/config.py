"""Runtime settings for the credential cache."""

from pathlib import Path
from typing import Literal, Optional, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import DEFAULT_DRIVER_NAME
from .storage import BackendKind


class CacheSettings(BaseSettings):
    """Credential cache settings.

    Values are read from ``CREDENTIAL_CACHE_*`` environment variables, e.g.
    ``CREDENTIAL_CACHE_BACKEND=none`` turns caching off entirely.
    """

    model_config = SettingsConfigDict(
        env_prefix="CREDENTIAL_CACHE_",
        case_sensitive=False,
    )

    backend: Union[Literal["auto"], BackendKind] = Field(
        default="auto",
        description="Backend to use, or 'auto' to select by operating system",
    )
    driver_name: str = Field(
        default=DEFAULT_DRIVER_NAME,
        min_length=1,
        description="Client identifier embedded in native entry names",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_dir: Optional[Path] = None

    @field_validator("backend", mode="before")
    @classmethod
    def _lower_backend(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value
