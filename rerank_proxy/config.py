"""Environment configuration for the rerank proxy using Pydantic."""

from functools import lru_cache
from typing import List, Union

from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"critical", "error", "warning", "info", "debug"}


class Settings(BaseSettings):
    """Process-wide settings, loaded once at startup and never mutated."""

    # Upstream TEI service
    TEI_ENDPOINT: AnyHttpUrl = "http://localhost:4000"
    UPSTREAM_TIMEOUT: float = 30.0

    # Proxy settings
    TEI_PROXY_PORT: int = 8000
    MAX_CLIENT_BATCH_SIZE: int = 1000
    APP_NAME: str = "rerank-proxy"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "info"

    # CORS settings
    ALLOWED_ORIGINS: Union[str, List[str]] = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        frozen=True,
    )

    @field_validator("MAX_CLIENT_BATCH_SIZE")
    @classmethod
    def batch_size_positive(cls, v: int) -> int:
        """A batch limit below one would reject every request."""
        if v < 1:
            raise ValueError(f"MAX_CLIENT_BATCH_SIZE must be >= 1, got {v}")
        return v

    @field_validator("UPSTREAM_TIMEOUT")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"UPSTREAM_TIMEOUT must be > 0, got {v}")
        return v

    @field_validator("TEI_PROXY_PORT")
    @classmethod
    def port_in_range(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError(f"Invalid TEI_PROXY_PORT: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def log_level_allowed(cls, v: str) -> str:
        """Validate log level is one the logging module knows."""
        normalized = v.strip().lower()
        assert normalized in _LOG_LEVELS, f"Invalid LOG_LEVEL: {v}"
        return normalized

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_origins(cls, value: Union[str, List[str]]) -> List[str]:
        """Parse ALLOWED_ORIGINS from string or list."""
        if isinstance(value, str):
            stripped = value.strip()
            if stripped == "*":
                return ["*"]
            return [origin.strip() for origin in stripped.split(",") if origin.strip()]
        return value

    @property
    def upstream_rerank_url(self) -> str:
        """Full URL of the upstream rerank route."""
        return f"{str(self.TEI_ENDPOINT).rstrip('/')}/rerank"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the settings instance built from the current environment."""
    return Settings()
