"""
Centralized configuration module for application-wide settings.

Values come from environment variables (optionally loaded from a `.env`
file by main.py). Timezone handling lives here so every datetime written by
the services uses the same zone.
"""

import logging
import os
from datetime import datetime
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

# ===========================
# Timezone Configuration
# ===========================


def get_app_timezone() -> ZoneInfo:
    """
    Get the application timezone from environment variable.

    Returns:
        ZoneInfo: Application timezone (defaults to UTC if not configured)

    Environment Variables:
        TZ: Timezone identifier (e.g., 'America/Sao_Paulo', 'UTC')
            Default: 'UTC'
    """
    tz_name = os.getenv("TZ", "UTC")

    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.warning(
            f"Invalid timezone '{tz_name}' specified in TZ environment variable. "
            f"Falling back to UTC. Error: {e}"
        )
        return ZoneInfo("UTC")


APP_TZ = get_app_timezone()


def now_in_app_tz() -> datetime:
    """Current time in the application timezone."""
    return datetime.now(APP_TZ)


def log_timezone_config():
    """Log the active timezone configuration at startup."""
    logger.info(
        "Timezone configuration initialized",
        extra={
            "context": {
                "timezone": str(APP_TZ),
                "tz_env_var": os.getenv("TZ", "UTC"),
            }
        },
    )


# ===========================
# Runtime flags
# ===========================


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower().strip() in ("true", "1", "yes")


def is_production() -> bool:
    return os.getenv("FLASK_ENV", "development") == "production"


def is_test_mode() -> bool:
    """Check if we're running in test mode (pytest/CI)."""
    return _env_flag("TESTING", "")


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", "sqlite:///./odonto.db")


def get_secret_key() -> str:
    return os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")


WEAK_SECRETS = ("dev-secret-change-me", "secret123")


def log_to_file_enabled() -> bool:
    return _env_flag("LOG_TO_FILE", "0")


def rate_limit_enabled() -> bool:
    return _env_flag("RATE_LIMIT_ENABLED", "1")


def metrics_enabled() -> bool:
    return _env_flag("METRICS_ENABLED", "1")


# ===========================
# Bootstrap admin
# ===========================


def get_admin_credentials():
    """Return (email, password) used by `manage.py ensure-admin`."""
    return os.getenv("ADMIN_EMAIL"), os.getenv("ADMIN_PASSWORD")
