"""
Services layer for the print shop order desk.

This module contains the business logic services:
- OrderService: Order lifecycle (create, complete, look up, reset)
- StatsService: Read-only ledger statistics
- DispatchService: Background print dispatch and its result store
- StudentService: Student registration and login

Thread Model:
    Main Thread (Flask)
    └── DispatchService threads (one per print request)

Only DispatchService starts threads; the others are stateless wrappers
around the LedgerStore.
"""

from .order_service import OrderService
from .stats_service import StatsService, GlobalStats, PaymentTotals
from .dispatch_service import DispatchService, DispatchResultStore, DispatchTicket
from .student_service import StudentService

__all__ = [
    "OrderService",
    "StatsService",
    "GlobalStats",
    "PaymentTotals",
    "DispatchService",
    "DispatchResultStore",
    "DispatchTicket",
    "StudentService",
]
