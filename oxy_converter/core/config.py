"""
Configuration module - centralized settings for the converter service.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override in production, set environment variables:
        export SECRET_KEY=your-super-secret-random-string
        export AUTH_REQUIRED=true
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",        # Load from .env file in project root
        env_file_encoding="utf-8",  # File encoding
        extra="ignore",         # Ignore extra env vars not defined here
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs and logging
    APP_NAME: str = "Oxy HTML Converter"

    # DEBUG: Enable debug mode (more verbose errors, auto-reload in dev)
    DEBUG: bool = False

    # LOG_LEVEL: Level of the oxy_converter loggers (DEBUG shows detector output)
    LOG_LEVEL: str = "INFO"

    # ---------------------------------------------------------------------------
    # JWT (JSON Web Token) SETTINGS
    # ---------------------------------------------------------------------------
    # SECRET_KEY: Used to sign JWT tokens
    # - MUST be changed in production to a long, random string
    # - Generate with: openssl rand -hex 32
    SECRET_KEY: str = "change-me-in-production"

    # ALGORITHM: JWT signing algorithm (HS256 = HMAC with SHA-256)
    ALGORITHM: str = "HS256"

    # ACCESS_TOKEN_EXPIRE_MINUTES: How long tokens are valid
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24  # 24 hours

    # AUTH_REQUIRED: Require a Bearer token on /convert endpoints
    # - False for local use behind a trusted admin panel
    AUTH_REQUIRED: bool = False

    # ---------------------------------------------------------------------------
    # INPUT LIMITS
    # ---------------------------------------------------------------------------
    # Requests above these sizes are rejected with 413 before conversion
    MAX_INPUT_BYTES: int = 1_000_000          # single /convert input
    MAX_BATCH_ITEM_BYTES: int = 500_000       # one batch item
    MAX_BATCH_TOTAL_BYTES: int = 5_000_000    # whole batch
    MAX_BATCH_ITEMS: int = 50

    # ---------------------------------------------------------------------------
    # CONVERTER SETTINGS
    # ---------------------------------------------------------------------------
    # CLASS_HANDLING_MODE: How utility classes are written to elements
    # - "utility": keep every class, bucket utility vs custom in stats
    # - "native": same output, plus a warning that native conversion is pending
    CLASS_HANDLING_MODE: str = "utility"

    # WRAP_INIT_SCRIPTS: Wrap top-level script statements in DOMContentLoaded
    WRAP_INIT_SCRIPTS: bool = False

    # ---------------------------------------------------------------------------
    # LAYOUT HEURISTICS
    # ---------------------------------------------------------------------------
    # Tuned for generated landing pages; all off by default
    HEURISTIC_STICKY_NAVBAR: bool = False
    HEURISTIC_NAV_LINK_WHITE: bool = False
    HEURISTIC_ROUNDED_FULL_CENTERING: bool = False
    HEURISTIC_BUTTON_CENTERING: bool = False
    HEURISTIC_FIXED_HEADER_SPACING: bool = False
    HEURISTIC_NAV_SCROLLED_CSS_REWRITE: bool = False


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from oxy_converter.core.config import settings
settings = Settings()
