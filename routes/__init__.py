"""
Flask route blueprints for the print shop order desk.

This module contains all route handlers organized by functionality:
- main: Health check
- admin: Staff login and ledger reset
- orders: Upload, order lookup, completion and printing
- stats: Dashboard statistics
- students: Student registration, login and profile
- payments: Payment gateway order creation

Each blueprint is registered with the Flask app in create_app().
"""

from .helpers import load_capability
from .main import main_bp
from .admin import admin_bp
from .orders import orders_bp
from .stats import stats_bp
from .students import students_bp
from .payments import payments_bp

__all__ = [
    "main_bp",
    "admin_bp",
    "orders_bp",
    "stats_bp",
    "students_bp",
    "payments_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Also installs the hook that resolves the caller's admin capability
    before every request.

    Args:
        app: Flask application instance
    """
    app.before_request(load_capability)

    app.register_blueprint(main_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(students_bp)
    app.register_blueprint(payments_bp)
