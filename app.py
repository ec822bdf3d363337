"""
Print Shop Order Desk - Flask Application Entry Point.

This is a slim app factory that:
1. Opens the ledger store (fail-fast)
2. Creates the order, stats, student and dispatch services
3. Builds the access gate, print sink and payment gateway
4. Registers route blueprints
5. Sets up JSON error handlers

ARCHITECTURE:
    Main Thread
    ├── Ledger store initialization (create tables)
    ├── Flask request handling
    └── Cleanup on shutdown (join dispatch threads, dispose engine)

    Dispatch Threads (one per print request)
    └── Submit each file to the print sink, publish a DispatchResult

Print dispatch never changes order state; completion is its own request.
"""

from __future__ import annotations

import atexit
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from logging_config import setup_logging, get_logger
from config import CONFIG_BY_ENVIRONMENT, Config
from core.access import AccessGate
from core.exceptions import PrintShopError, StoreError
from core.ledger_store import LedgerStore
from modules.payment_gateway import create_payment_gateway
from modules.print_sink import create_print_sink
from services.dispatch_service import DispatchService
from services.order_service import OrderService
from services.stats_service import StatsService
from services.student_service import StudentService
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In a frozen bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(config_overrides: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Application factory - creates and configures Flask app.

    FAIL-FAST: If the ledger store cannot be opened, the app will not start.

    Args:
        config_overrides: Settings applied on top of the environment's
            config class (tests use this for DATABASE_URL, UPLOAD_FOLDER...)

    Returns:
        Configured Flask application

    Raises:
        StoreError: If the ledger database cannot be opened
    """
    # .env next to the executable/app takes precedence over the shell
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    environment = os.environ.get("FLASK_ENV", "development")
    app.config.from_object(CONFIG_BY_ENVIRONMENT.get(environment, Config))
    if config_overrides:
        app.config.update(config_overrides)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        app_name="print_shop",
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting print shop order desk in {app.config.get('ENVIRONMENT')} mode")

    upload_folder = Path(app.config["UPLOAD_FOLDER"])
    upload_folder.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # CORE INITIALIZATION (FAIL-FAST)
    # =========================================================================

    store = LedgerStore(app.config["DATABASE_URL"], logger=get_logger("core.ledger_store"))
    try:
        store.initialize()
    except StoreError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise

    app.config["LEDGER_STORE"] = store

    app.config["ACCESS_GATE"] = AccessGate(
        secret_key=app.config["SECRET_KEY"],
        admin_username=app.config["ADMIN_USERNAME"],
        admin_password=app.config["ADMIN_PASSWORD"],
        max_age_seconds=app.config["ADMIN_TOKEN_MAX_AGE"],
    )

    # =========================================================================
    # SERVICES INITIALIZATION
    # =========================================================================

    order_service = OrderService(store, max_files=app.config["MAX_FILES_PER_ORDER"])
    app.config["ORDER_SERVICE"] = order_service
    app.config["STATS_SERVICE"] = StatsService(store)
    app.config["STUDENT_SERVICE"] = StudentService(store)

    print_sink = app.config.get("PRINT_SINK_INSTANCE") or create_print_sink(
        app.config["PRINT_SINK"],
        command=app.config["PRINT_COMMAND"],
        timeout_seconds=app.config["PRINT_TIMEOUT_SECONDS"],
    )
    dispatch_service = DispatchService(order_service, print_sink, upload_folder)
    app.config["DISPATCH_SERVICE"] = dispatch_service
    logger.info(f"Dispatch service using {type(print_sink).__name__}")

    app.config["PAYMENT_GATEWAY"] = app.config.get("PAYMENT_GATEWAY_INSTANCE") or create_payment_gateway(
        app.config["RAZORPAY_KEY_ID"], app.config["RAZORPAY_KEY_SECRET"]
    )

    # =========================================================================
    # CLEANUP REGISTRATION
    # =========================================================================

    def cleanup():
        """Cleanup on application shutdown."""
        logger.info("Shutting down...")
        dispatch_service.shutdown()
        store.cleanup()
        logger.info("Shutdown complete")

    app.config["CLEANUP"] = cleanup
    atexit.register(cleanup)

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(PrintShopError)
    def handle_print_shop_error(e: PrintShopError):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__}: {e}")
        else:
            logger.info(f"{type(e).__name__}: {e}")
        return {"error": e.public_message}, e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_file_too_large(e):
        max_mb = app.config.get("MAX_CONTENT_LENGTH", 50 * 1024 * 1024) / (1024 * 1024)
        return {"error": f"Upload too large. Maximum request size is {max_mb:.0f} MB."}, 413

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return {"error": e.name}, e.code

    @app.errorhandler(Exception)
    def handle_server_error(e):
        logger.error(f"Unhandled error: {e}", exc_info=True)
        return {"error": "An unexpected error occurred"}, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(host=os.environ.get("HOST", "127.0.0.1"), port=int(os.environ.get("PORT", "5000")), debug=debug_mode)
