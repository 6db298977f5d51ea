"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.

Notification transports are enabled purely by the presence of their
credentials: a missing Twilio SID or SMTP password never stops the
application, it only downgrades that channel to log-only delivery.

Usage:
    from app.core.config import get_settings

    settings = get_settings()
    if settings.sms_configured:
        # Twilio credentials are present
"""

import logging
import sys
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Placeholder SID shipped in sample .env files; treated as "not configured"
TWILIO_PLACEHOLDER_SID = "ACxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Credentials should NEVER be committed to version control.

    Attributes:
        debug: Enable verbose logging and SQL echo

        # API Configuration
        api_host: Host to bind the API server
        port: Port for the API server (env PORT)
        static_dir: Directory served for non-API paths

        # Database
        database_url: SQLAlchemy async connection string
        init_db_on_startup: Create tables and seed the menu at startup

        # Outbound mail (SMTP or SendGrid)
        smtp_host, smtp_port, smtp_user, smtp_pass, from_email
        sendgrid_api_key

        # SMS (Twilio)
        twilio_account_sid, twilio_auth_token, twilio_phone_number

        # Business Configuration
        restaurant_name: Name used in customer messages
        restaurant_phone: Contact number printed in emails
        currency_symbol: Prefix for amounts in messages
        reservation_advance: Advance amount quoted in reservation messages
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="La Bella Restaurant API",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    port: int = Field(
        default=3000,
        description="API server port"
    )
    static_dir: str = Field(
        default="public",
        description="Directory with frontend files served for non-API paths"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: str = Field(
        default="sqlite+aiosqlite:///./restaurant.db",
        description="SQLAlchemy async database URL"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )
    init_db_on_startup: bool = Field(
        default=True,
        description="Create tables and seed the menu when the API starts"
    )

    # ==========================================================================
    # SMTP (EMAIL)
    # ==========================================================================

    smtp_host: Optional[str] = Field(
        default=None,
        description="SMTP server host"
    )
    smtp_port: int = Field(
        default=587,
        description="SMTP server port (465 uses implicit TLS)"
    )
    smtp_user: Optional[str] = Field(
        default=None,
        description="SMTP login user"
    )
    smtp_pass: Optional[str] = Field(
        default=None,
        description="SMTP login password"
    )
    from_email: Optional[str] = Field(
        default=None,
        description="From address for outgoing email (defaults to SMTP_USER)"
    )

    # ==========================================================================
    # SENDGRID (EMAIL)
    # ==========================================================================

    sendgrid_api_key: Optional[str] = Field(
        default=None,
        description="SendGrid API Key, used when SMTP is not configured"
    )

    # ==========================================================================
    # TWILIO (SMS)
    # ==========================================================================

    twilio_account_sid: Optional[str] = Field(
        default=None,
        description="Twilio Account SID"
    )
    twilio_auth_token: Optional[str] = Field(
        default=None,
        description="Twilio Auth Token"
    )
    twilio_phone_number: Optional[str] = Field(
        default=None,
        description="Twilio phone number for sending SMS"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    restaurant_name: str = Field(
        default="La Bella",
        description="Restaurant display name"
    )
    restaurant_phone: str = Field(
        default="+91 99866 45103",
        description="Restaurant contact number"
    )
    currency_symbol: str = Field(
        default="₹",
        description="Currency symbol used in customer messages"
    )
    reservation_advance: float = Field(
        default=100,
        description="Advance amount quoted in reservation confirmations"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator(
        "smtp_host", "smtp_user", "smtp_pass", "from_email", "sendgrid_api_key",
        "twilio_account_sid", "twilio_auth_token", "twilio_phone_number",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def sms_configured(self) -> bool:
        """Check if Twilio credentials are usable."""
        return bool(
            self.twilio_account_sid
            and self.twilio_auth_token
            and self.twilio_account_sid != TWILIO_PLACEHOLDER_SID
        )

    @property
    def smtp_configured(self) -> bool:
        """Check if SMTP host and login are all present."""
        return bool(self.smtp_host and self.smtp_user and self.smtp_pass)

    @property
    def sender_email(self) -> Optional[str]:
        """From address for outgoing email."""
        return self.from_email or self.smtp_user

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_notification_config(self) -> list[str]:
        """
        List the settings missing for real SMS and email delivery.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if not self.sms_configured:
            missing.extend(["TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN"])
        if not self.smtp_configured and not self.sendgrid_api_key:
            missing.extend(["SMTP_HOST", "SMTP_USER", "SMTP_PASS"])

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are read once per process; tests call
    ``get_settings.cache_clear()`` after changing the environment.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured application logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("twilio.http_client").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("app")
