"""
Dashboard statistics routes (admin capability).

- GET /api/stats                          - Ledger-wide counts and earnings
- GET /api/daily-payments?date=YYYY-MM-DD - Cash/online totals for one day
- GET /api/orders-filtered?filter=        - Cash/online totals for today|week|month
"""

from flask import Blueprint, request

from .helpers import admin_required, service

stats_bp = Blueprint("stats", __name__)


@stats_bp.route("/api/stats", methods=["GET"])
@admin_required
def stats():
    return service("STATS_SERVICE").global_stats().to_dict()


@stats_bp.route("/api/daily-payments", methods=["GET"])
@admin_required
def daily_payments():
    return service("STATS_SERVICE").daily_payments(request.args.get("date")).to_dict()


@stats_bp.route("/api/orders-filtered", methods=["GET"])
@admin_required
def orders_filtered():
    return service("STATS_SERVICE").ranged_payments(request.args.get("filter", "today")).to_dict()
