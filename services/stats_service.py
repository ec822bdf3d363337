"""
Aggregation service: read-only statistics over the order ledger.

Every payment breakdown (a single day, today, this week, this month) is
the same computation over a different created_at window:

    SELECT payment_method, COUNT(*), SUM(amount)
    FROM orders
    WHERE created_at >= :start AND created_at < :end
    GROUP BY payment_method

so cash + online counts always add up to the window's order count.
Boundaries are bound parameters, never formatted into SQL.

Calendar days are UTC days, matching the UTC created_at timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Any, Optional

from sqlalchemy import case, func, select

from core.exceptions import ValidationError
from core.ledger_store import LedgerStore
from models.base import utc_now
from models.order import Order, OrderStatus, PaymentMethod
from logging_config import get_logger


logger = get_logger(__name__)

RANGE_KINDS = ("today", "week", "month")

# Weeks start on Sunday (datetime.weekday(): Monday=0 ... Sunday=6)
WEEK_START_WEEKDAY = 6


@dataclass(frozen=True)
class GlobalStats:
    """Counts over the whole ledger."""

    total: int = 0
    pending: int = 0
    completed: int = 0
    online_paid: int = 0
    cash_paid: int = 0
    total_earned: int = 0
    """Sum of amount over completed orders only."""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "pending": self.pending,
            "completed": self.completed,
            "onlinePaid": self.online_paid,
            "cashPaid": self.cash_paid,
            "totalEarned": self.total_earned,
        }


@dataclass(frozen=True)
class PaymentTotals:
    """Orders in one created_at window, split by payment method."""

    start: datetime
    end: datetime
    cash_count: int = 0
    cash_total: int = 0
    online_count: int = 0
    online_total: int = 0
    label_key: str = "date"
    label: str = ""

    @property
    def count(self) -> int:
        return self.cash_count + self.online_count

    @property
    def total(self) -> int:
        return self.cash_total + self.online_total

    def to_dict(self) -> Dict[str, Any]:
        return {
            self.label_key: self.label,
            "from": self.start.isoformat(),
            "to": self.end.isoformat(),
            "cashCount": self.cash_count,
            "cashTotal": self.cash_total,
            "onlineCount": self.online_count,
            "onlineTotal": self.online_total,
        }


class StatsService:
    """Computes dashboard statistics. Never writes to the store."""

    def __init__(self, store: LedgerStore, clock: Callable[[], datetime] = utc_now):
        """
        Args:
            store: Initialized LedgerStore
            clock: Source of "now" (naive UTC)
        """
        self._store = store
        self._clock = clock

    def global_stats(self) -> GlobalStats:
        """Order counts by status and payment method, plus earnings."""
        is_completed = Order.status == OrderStatus.COMPLETED
        stmt = select(
            func.count(Order.id),
            func.count(case((Order.status == OrderStatus.PENDING, 1))),
            func.count(case((is_completed, 1))),
            func.count(case((Order.payment_method == PaymentMethod.ONLINE, 1))),
            func.count(case((Order.payment_method == PaymentMethod.CASH, 1))),
            func.coalesce(func.sum(case((is_completed, Order.amount), else_=0)), 0),
        )

        with self._store.session_scope("global_stats") as session:
            total, pending, completed, online, cash, earned = session.execute(stmt).one()

        return GlobalStats(
            total=total,
            pending=pending,
            completed=completed,
            online_paid=online,
            cash_paid=cash,
            total_earned=int(earned or 0),
        )

    def daily_payments(self, day: Optional[str] = None) -> PaymentTotals:
        """
        Payment totals for one calendar day.

        Args:
            day: "YYYY-MM-DD"; today when omitted

        Raises:
            ValidationError: If day is not a valid date
        """
        if day:
            try:
                target = date.fromisoformat(day.strip())
            except ValueError:
                raise ValidationError("Invalid date, expected YYYY-MM-DD", field="date")
        else:
            target = self._clock().date()

        start = datetime.combine(target, time.min)
        try:
            end = start + timedelta(days=1)
        except OverflowError:
            raise ValidationError("Invalid date, expected YYYY-MM-DD", field="date")
        totals = self.window_totals(start, end)
        return replace(totals, label_key="date", label=target.isoformat())

    def ranged_payments(self, range_kind: Optional[str] = "today") -> PaymentTotals:
        """
        Payment totals from the start of today, this week or this month
        up to now.

        The week starts on Sunday but never before the first of the month,
        so today's window is inside the week's and the week's is inside
        the month's. Early in a month this makes "week" shorter than the
        plain count back to Sunday: on Friday 2026-10-02 the week starts
        on 2026-10-01, not Sunday 2026-09-27.

        Raises:
            ValidationError: If range_kind is not today, week or month
        """
        kind = (range_kind or "today").strip().lower()
        if kind not in RANGE_KINDS:
            raise ValidationError("Invalid filter", field="filter")

        now = self._clock()
        start = datetime.combine(range_start(kind, now.date()), time.min)

        # Upper bound is "now", inclusive
        totals = self.window_totals(start, now + timedelta(microseconds=1))
        return replace(totals, label_key="filter", label=kind)

    def window_totals(self, start: datetime, end: datetime) -> PaymentTotals:
        """
        Count and sum orders with start <= created_at < end, by payment method.
        """
        stmt = (
            select(
                Order.payment_method,
                func.count(Order.id),
                func.coalesce(func.sum(Order.amount), 0),
            )
            .where(Order.created_at >= start, Order.created_at < end)
            .group_by(Order.payment_method)
        )

        with self._store.session_scope("window_totals") as session:
            rows = session.execute(stmt).all()

        by_method = {method: (count, int(total or 0)) for method, count, total in rows}
        cash_count, cash_total = by_method.get(PaymentMethod.CASH, (0, 0))
        online_count, online_total = by_method.get(PaymentMethod.ONLINE, (0, 0))

        logger.debug(
            f"Window {start.isoformat()} .. {end.isoformat()}: "
            f"cash {cash_count}/{cash_total}, online {online_count}/{online_total}"
        )
        return PaymentTotals(
            start=start,
            end=end,
            cash_count=cash_count,
            cash_total=cash_total,
            online_count=online_count,
            online_total=online_total,
        )


def range_start(kind: str, today: date) -> date:
    """First calendar day of the today/week/month window containing today."""
    month_start = today.replace(day=1)
    if kind == "today":
        return today
    if kind == "week":
        days_since_week_start = (today.weekday() - WEEK_START_WEEKDAY) % 7
        return max(today - timedelta(days=days_since_week_start), month_start)
    if kind == "month":
        return month_start
    raise ValidationError("Invalid filter", field="filter")

