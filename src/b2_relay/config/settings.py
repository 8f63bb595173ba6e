# src/b2_relay/config/settings.py
from typing import List, Optional, Dict, Any
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

DEFAULT_B2_AUTH_URL = "https://api.backblazeb2.com"


class Settings(BaseSettings):
    """
    Single source of truth for all relay settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from b2_relay.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.b2_bucket_name
    """

    # B2 Credentials
    b2_key_id: Optional[str] = Field(
        default=None,
        description="Application key id used for b2_authorize_account"
    )

    b2_app_key: Optional[str] = Field(
        default=None,
        description="Application key secret used for b2_authorize_account"
    )

    # B2 Bucket
    b2_bucket_id: str = Field(
        default="",
        description="Bucket id sent with b2_get_upload_url and b2_list_file_names"
    )

    b2_bucket_name: str = Field(
        default="",
        description="Bucket name used to build public download URLs"
    )

    b2_auth_url: str = Field(
        default=DEFAULT_B2_AUTH_URL,
        description="Base URL of the B2 account authorization endpoint"
    )

    # HTTP client
    upstream_timeout: Optional[float] = Field(
        default=None,
        description="Timeout in seconds for upstream calls (unset waits indefinitely)"
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)

    cors_allow_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware"
    )

    # Multipart staging
    upload_dir: str = Field(
        default="uploads",
        description="Directory where inbound uploads are staged before relaying"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("b2_auth_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        return v.upper()

    def as_display_dict(self) -> Dict[str, Any]:
        """Settings as a dictionary with the application key masked."""
        return {
            "B2_KEY_ID": self.b2_key_id,
            "B2_APP_KEY": "****" if self.b2_app_key else None,
            "B2_BUCKET_ID": self.b2_bucket_id,
            "B2_BUCKET_NAME": self.b2_bucket_name,
            "B2_AUTH_URL": self.b2_auth_url,
            "UPSTREAM_TIMEOUT": self.upstream_timeout,
            "HOST": self.host,
            "PORT": self.port,
            "CORS_ALLOW_ORIGINS": self.cors_allow_origins,
            "UPLOAD_DIR": self.upload_dir,
            "LOG_LEVEL": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
