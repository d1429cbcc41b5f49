"""
Application configuration

SECURITY: Defaults are fail-safe for production.
- DEBUG defaults to False
- AUSPOST_API_KEY has an empty default; the carrier refuses to start without it
- Runtime validation catches insecure configurations
"""
import logging
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_AUSPOST_API_BASE = "https://auspost.com.au/api/postage"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App - defaults are PRODUCTION safe
    APP_NAME: str = "AusPost Rates"
    DEBUG: bool = False  # SECURE DEFAULT: off in production
    ENVIRONMENT: str = "production"  # Explicit env marker
    LOG_LEVEL: str = "INFO"

    # Australia Post PAC API
    AUSPOST_API_KEY: str = ""
    AUSPOST_API_BASE: str = DEFAULT_AUSPOST_API_BASE
    AUSPOST_TEST_MODE: bool = False
    AUSPOST_HTTP_TIMEOUT: float = 30.0  # seconds

    @field_validator("AUSPOST_API_BASE", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v):
        """URLs are built as {base}/{endpoint}.json, so drop any trailing slash."""
        if not v:
            return DEFAULT_AUSPOST_API_BASE
        return str(v).rstrip("/")

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        return str(v).upper() if v else "INFO"

    @model_validator(mode="after")
    def validate_production_config(self):
        """Runtime validation to catch insecure production configurations."""
        if self.ENVIRONMENT == "production" and self.DEBUG:
            raise ValueError(
                "PRODUCTION SECURITY VIOLATIONS:\n"
                "  - DEBUG=True is forbidden in production. "
                "Set DEBUG=false or ENVIRONMENT=development"
            )
        return self


settings = Settings()
