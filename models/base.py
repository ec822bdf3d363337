"""Declarative base shared by all ledger tables."""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the form SQLite stores)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
