"""
Configuration for the print shop order desk.

All settings can be overridden through environment variables or a .env
file next to the application.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # 50 MB per request (up to 10 files)
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Ledger store
    DATABASE_URL = os.environ.get(
        "DATABASE_URL", f"sqlite:///{BASE_DIR / 'print_shop.sqlite'}"
    )

    # Orders
    MAX_FILES_PER_ORDER = int(os.environ.get("MAX_FILES_PER_ORDER", "10"))

    # ==========================================================================
    # Admin access
    # ==========================================================================
    # A successful /api/login returns a signed capability token. Clients send
    # it back as "Authorization: Bearer <token>". Tokens expire after
    # ADMIN_TOKEN_MAX_AGE seconds (default: one day).
    # ==========================================================================
    ADMIN_USERNAME = os.environ.get("ADMIN_USER", "admin")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASS", "1234")
    ADMIN_TOKEN_MAX_AGE = int(os.environ.get("ADMIN_TOKEN_MAX_AGE", str(24 * 60 * 60)))

    # Payment gateway (Razorpay). Empty keys select the stub gateway.
    RAZORPAY_KEY_ID = os.environ.get("RAZORPAY_KEY_ID", "")
    RAZORPAY_KEY_SECRET = os.environ.get("RAZORPAY_KEY_SECRET", "")

    # ==========================================================================
    # Print sink
    # ==========================================================================
    # PRINT_SINK: "system" sends files to the OS printer, "stub" only records
    #   them (handy on machines without a printer).
    # PRINT_COMMAND: command used on non-Windows hosts; the file path is
    #   appended as the last argument. Windows uses the shell "print" verb.
    # ==========================================================================
    PRINT_SINK = os.environ.get("PRINT_SINK", "system")
    PRINT_COMMAND = os.environ.get("PRINT_COMMAND", "lp")
    PRINT_TIMEOUT_SECONDS = float(os.environ.get("PRINT_TIMEOUT_SECONDS", "30"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False
    PRINT_SINK = os.environ.get("PRINT_SINK", "stub")


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    DATABASE_URL = "sqlite://"
    PRINT_SINK = "stub"
    RAZORPAY_KEY_ID = ""
    RAZORPAY_KEY_SECRET = ""
    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "1234"


CONFIG_BY_ENVIRONMENT = {
    "production": ProductionConfig,
    "development": DevelopmentConfig,
    "testing": TestingConfig,
}
