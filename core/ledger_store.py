"""
Ledger store: durable record of orders and students.

The store owns the SQLAlchemy engine and the two ledger tables. Every
public method is one independent round trip with its own session; nothing
is composed into a multi-statement transaction. Services hold no state of
their own and read/write exclusively through this class.

ERROR TRANSLATION:
    - IntegrityError on student email  -> ConflictError (nothing written)
    - any other SQLAlchemyError         -> StoreError (logged, opaque)

Usage:
    # At application startup
    store = LedgerStore("sqlite:///print_shop.sqlite")
    store.initialize()

    # In services
    order = store.add_order(Order(...))
    with store.session_scope("global_stats") as session:
        session.execute(...)

    # At application shutdown
    store.cleanup()
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import create_engine, delete, func, select, text, update
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base, Order, OrderStatus, Student
from .exceptions import ConflictError, PrintShopError, StoreError

# Largest row id a 64-bit INTEGER column can hold
MAX_ROW_ID = 2 ** 63 - 1


def _is_row_id(value: int) -> bool:
    return 0 < value <= MAX_ROW_ID


class LedgerStore:
    """
    SQLAlchemy-backed store for the `orders` and `students` tables.

    Attributes:
        is_initialized: True once the engine exists and tables are created
    """

    def __init__(self, database_url: str, logger: Optional[logging.Logger] = None):
        """
        Initialize the store.

        Args:
            database_url: SQLAlchemy database URL
            logger: Logger instance (optional, creates default if not provided)

        Note:
            This does NOT connect - call initialize() to do that.
        """
        self._database_url = database_url
        self._logger = logger or logging.getLogger("print_shop.core.ledger_store")
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def initialize(self) -> None:
        """
        Create the engine and any missing tables.

        Raises:
            StoreError: If the database cannot be opened
            RuntimeError: If called when already initialized
        """
        if self._engine is not None:
            raise RuntimeError("Ledger store already initialized")

        engine_kwargs = {}
        if self._database_url.startswith("sqlite"):
            # Dispatch threads and the request thread share the database
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if self._database_url in ("sqlite://", "sqlite:///:memory:"):
                # One connection, otherwise every checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool

        self._logger.info(f"Opening ledger store: {self._safe_url()}")
        try:
            engine = create_engine(self._database_url, **engine_kwargs)
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            self._logger.critical(f"Cannot open ledger store: {e}")
            raise StoreError("initialize", e) from e

        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        self._logger.info("Ledger store ready")

    def cleanup(self) -> None:
        """Dispose of the engine. Safe to call multiple times."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._logger.info("Ledger store closed")

    def __enter__(self) -> "LedgerStore":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()

    @contextmanager
    def session_scope(self, operation: str) -> Iterator[Session]:
        """
        Provide a session for one store operation.

        Commits on success, rolls back on any error. Database errors are
        logged with their detail and re-raised as StoreError.

        Args:
            operation: Short name used in logs and in StoreError
        """
        if self._session_factory is None:
            raise RuntimeError("Ledger store not initialized - call initialize() first")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except PrintShopError:
            session.rollback()
            raise
        except SQLAlchemyError as e:
            session.rollback()
            self._logger.error(f"Store operation '{operation}' failed: {e}")
            raise StoreError(operation, e) from e
        finally:
            session.close()

    # =========================================================================
    # ORDERS
    # =========================================================================

    def add_order(self, order: Order) -> Order:
        """Insert a new order and return it with its assigned id."""
        with self.session_scope("add_order") as session:
            session.add(order)
            session.flush()
        return order

    def get_order(self, order_id: int) -> Optional[Order]:
        """The order with this id, or None. Ids outside the row id range match nothing."""
        if not _is_row_id(order_id):
            return None
        with self.session_scope("get_order") as session:
            return session.get(Order, order_id)

    def list_orders(self, student_name: Optional[str] = None) -> List[Order]:
        """
        List orders, newest first.

        Args:
            student_name: Only orders filed under this exact name (optional)
        """
        stmt = select(Order).order_by(Order.id.desc())
        if student_name is not None:
            stmt = stmt.where(Order.student_name == student_name)

        with self.session_scope("list_orders") as session:
            return list(session.scalars(stmt))

    def set_order_status(self, order_id: int, status: OrderStatus) -> int:
        """
        Set an order's status.

        Returns:
            Number of rows matched (0 when the order does not exist)
        """
        if not _is_row_id(order_id):
            return 0
        stmt = update(Order).where(Order.id == order_id).values(status=status)
        with self.session_scope("set_order_status") as session:
            return session.execute(stmt).rowcount

    def count_orders(self) -> int:
        with self.session_scope("count_orders") as session:
            return session.scalar(select(func.count(Order.id)))

    def delete_all_orders(self) -> int:
        """Remove every order row. Returns the number of rows removed."""
        with self.session_scope("delete_all_orders") as session:
            return session.execute(delete(Order)).rowcount

    # =========================================================================
    # STUDENTS
    # =========================================================================

    def add_student(self, student: Student) -> Student:
        """
        Insert a new student.

        Raises:
            ConflictError: If the email is already registered
        """
        with self.session_scope("add_student") as session:
            session.add(student)
            try:
                session.flush()
            except IntegrityError as e:
                self._logger.info(f"Duplicate student email rejected: {student.email}")
                raise ConflictError("Email already exists", field="email") from e
        return student

    def get_student(self, student_id: int) -> Optional[Student]:
        if not _is_row_id(student_id):
            return None
        with self.session_scope("get_student") as session:
            return session.get(Student, student_id)

    def get_student_by_email(self, email: str) -> Optional[Student]:
        with self.session_scope("get_student_by_email") as session:
            return session.scalar(select(Student).where(Student.email == email))

    def count_students(self) -> int:
        with self.session_scope("count_students") as session:
            return session.scalar(select(func.count(Student.id)))

    # =========================================================================
    # HEALTH
    # =========================================================================

    def ping(self) -> bool:
        """True if the database answers a trivial query."""
        try:
            with self.session_scope("ping") as session:
                session.execute(text("SELECT 1"))
            return True
        except StoreError:
            return False

    def _safe_url(self) -> str:
        """Database URL with any password masked, for logs."""
        return make_url(self._database_url).render_as_string(hide_password=True)
