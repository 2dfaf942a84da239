"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Promptbook"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # Database
    DATABASE_URL: str = Field(..., description="PostgreSQL connection string")
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # Authentication
    # none: every request runs as AUTH_DEV_SUBJECT (local development only)
    # psk:  pre-shared bearer tokens, each mapped to a user subject
    # jwt:  signed JWTs, the "sub" claim is the user subject
    AUTH_MODE: str = "psk"
    AUTH_DEV_SUBJECT: str = "dev"
    AUTH_PSK_TOKENS: str = Field("", description="Comma separated token:subject pairs")
    AUTH_JWT_PUBLIC_KEY: Optional[str] = None
    AUTH_JWT_JWKS_URL: Optional[str] = None
    AUTH_JWT_ISSUER: Optional[str] = None
    AUTH_JWT_AUDIENCE: Optional[str] = None
    AUTH_JWT_SCOPE_CLAIM: str = "scope"

    # Observability
    METRICS_ENABLED: bool = True

    @property
    def psk_tokens_map(self) -> Dict[str, str]:
        """Parse AUTH_PSK_TOKENS into a token -> subject mapping."""
        tokens = {}
        for pair in self.AUTH_PSK_TOKENS.split(","):
            token, sep, subject = pair.strip().partition(":")
            if sep and token and subject:
                tokens[token] = subject
        return tokens

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v

    @field_validator("AUTH_MODE")
    @classmethod
    def validate_auth_mode(cls, v: str) -> str:
        """Validate auth mode."""
        valid_modes = {"none", "psk", "jwt"}
        v = v.lower()
        if v not in valid_modes:
            raise ValueError(f"AUTH_MODE must be one of {valid_modes}")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
