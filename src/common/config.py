"""
Configuration loader for the job board.

Loads all settings from environment variables (.env file).
Validates required settings and provides type-safe access.
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [item.strip().lower() for item in value.split(",") if item.strip()]


class Config:
    """
    Centralized configuration for the web app and its services.

    All values loaded from environment variables - NO SECRETS IN CODE.
    """

    # ===== MongoDB =====
    MONGODB_URI: str = os.getenv("MONGODB_URI", "")
    MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "job_board")

    # ===== Listing =====
    # The original board showed 5 jobs per page
    JOBS_PER_PAGE: int = int(os.getenv("JOBS_PER_PAGE", "5"))

    # ===== Accounts =====
    ADMIN_EMAILS: List[str] = _split_csv(os.getenv("ADMIN_EMAILS", ""))
    MIN_PASSWORD_LENGTH: int = 6

    # ===== Web =====
    FLASK_SECRET_KEY: str = os.getenv("FLASK_SECRET_KEY", "")
    MAX_CSV_UPLOAD_BYTES: int = int(os.getenv("MAX_CSV_UPLOAD_BYTES", str(5 * 1024 * 1024)))

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "simple")
    DEBUG_MODE: bool = os.getenv("DEBUG_MODE", "false").lower() == "true"

    @classmethod
    def validate(cls) -> None:
        """
        Validate that all required configuration is present.
        Raises ValueError if critical settings are missing.
        """
        required_settings = {
            "MONGODB_URI": cls.MONGODB_URI,
            "FLASK_SECRET_KEY": cls.FLASK_SECRET_KEY,
        }

        missing = [name for name, value in required_settings.items() if not value]

        if missing:
            raise ValueError(
                f"Missing required configuration: {', '.join(missing)}. "
                f"Please check your .env file."
            )

        if cls.JOBS_PER_PAGE <= 0:
            raise ValueError(f"JOBS_PER_PAGE must be positive, got {cls.JOBS_PER_PAGE}")

    @classmethod
    def summary(cls) -> str:
        """Return a summary of the current configuration (safe for logging)."""
        return f"""
Configuration Summary:
  MongoDB: {'✓ Configured' if cls.MONGODB_URI else '✗ Missing'} (database: {cls.MONGODB_DATABASE})
  Session Secret: {'✓ Configured' if cls.FLASK_SECRET_KEY else '✗ Missing'}
  Jobs Per Page: {cls.JOBS_PER_PAGE}
  Admins: {len(cls.ADMIN_EMAILS)}
  Log Level: {'DEBUG (DEBUG_MODE)' if cls.DEBUG_MODE else cls.LOG_LEVEL} ({cls.LOG_FORMAT})
        """.strip()
