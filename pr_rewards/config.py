"""
Configuration Management Module

This module handles all application configuration using Pydantic Settings.
Configuration is loaded from environment variables with strong typing and validation.

Design Decisions:
- Use Pydantic Settings for automatic environment variable loading
- Validate configuration at startup (fail-fast approach)
- Accept the legacy GITHUB_SECRET / TEAMS_WEBHOOK_URL variable names
- The shared secret and chat webhook URL are never logged
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "pokemon.json"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    All sensitive values are loaded from environment variables only,
    never hardcoded or logged.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True
    )
    
    # =========================================================================
    # Inbound Webhook
    # =========================================================================
    github_webhook_secret: str = Field(
        min_length=1,
        validation_alias=AliasChoices("github_webhook_secret", "github_secret"),
        description="Shared secret used as the HMAC-SHA256 key"
    )
    
    # =========================================================================
    # Outbound Notification
    # =========================================================================
    chat_webhook_url: str = Field(
        min_length=1,
        validation_alias=AliasChoices("chat_webhook_url", "teams_webhook_url"),
        description="Incoming-webhook URL of the chat channel"
    )
    
    notification_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for the single notification attempt"
    )
    
    # =========================================================================
    # Rewards
    # =========================================================================
    reward_catalog_path: Path = Field(
        default=DEFAULT_CATALOG_PATH,
        description="Path to the JSON reward catalog"
    )
    
    # =========================================================================
    # Server Configuration
    # =========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server"
    )
    
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port to bind the server"
    )
    
    # =========================================================================
    # Logging Configuration
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    
    log_json_format: bool = Field(
        default=True,
        description="Enable JSON logging format"
    )
    
    log_requests: bool = Field(
        default=False,
        description="Enable request/response logging"
    )
    
    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v_upper
    
    @field_validator("chat_webhook_url")
    @classmethod
    def validate_webhook_url(cls, v: str) -> str:
        """Only plain HTTP(S) destinations are supported."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Chat webhook URL must use http:// or https://")
        return v
    
    @property
    def webhook_secret_bytes(self) -> bytes:
        """HMAC key material for signature verification."""
        return self.github_webhook_secret.encode("utf-8")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.
    
    Uses lru_cache to ensure settings are only loaded once,
    which is important for performance and consistency.
    
    Returns:
        Settings instance
    """
    return Settings()
