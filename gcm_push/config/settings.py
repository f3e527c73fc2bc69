from __future__ import annotations

from functools import lru_cache
from urllib.parse import urlparse

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOCAL_HOSTS = {"localhost", "127.0.0.1", "::1"}


class GcmSettings(BaseSettings):
    # Legacy HTTP server key
    api_key: SecretStr | None = None
    endpoint: str = "https://fcm.googleapis.com/fcm/send"
    timeout_seconds: float = 10.0
    # Used when a 5xx/429 response carries no Retry-After header
    default_retry_after: float = 2.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="GCM_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("endpoint")
    @classmethod
    def ensure_https(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme == "https":
            return value
        if parsed.scheme == "http" and parsed.hostname in _LOCAL_HOSTS:
            return value
        raise ValueError("endpoint must use https")

    @field_validator("timeout_seconds", "default_retry_after")
    @classmethod
    def ensure_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    def get_api_key(self) -> str | None:
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> GcmSettings:
    return GcmSettings()
