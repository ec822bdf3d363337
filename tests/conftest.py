"""
Shared fixtures for the print shop test suite.

Every test gets its own SQLite file under tmp_path, so tests never see
each other's orders.
"""

import io
from datetime import datetime

import pytest

from app import create_app
from core.ledger_store import LedgerStore
from models.order import OrderInput, PaymentMethod
from modules.payment_gateway import PaymentGatewayStub
from modules.print_sink import StubPrintSink
from services.order_service import OrderService
from services.stats_service import StatsService


class FixedClock:
    """Clock whose "now" the test moves by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# Wednesday; the week started Sunday 2026-10-11
WEDNESDAY = datetime(2026, 10, 14, 10, 30)


@pytest.fixture
def store(tmp_path):
    """Initialized ledger store on a fresh SQLite file."""
    ledger = LedgerStore(f"sqlite:///{tmp_path / 'ledger.sqlite'}")
    ledger.initialize()
    yield ledger
    ledger.cleanup()


@pytest.fixture
def clock():
    return FixedClock(WEDNESDAY)


@pytest.fixture
def order_service(store, clock):
    return OrderService(store, clock=clock)


@pytest.fixture
def stats_service(store, clock):
    return StatsService(store, clock=clock)


@pytest.fixture
def make_order(order_service, clock):
    """Create an order, optionally at a given time."""

    def _make(
        student_name="Asha",
        files=("uploads/a.pdf",),
        payment_method=PaymentMethod.CASH,
        amount=10,
        at=None,
        **extra,
    ):
        if at is not None:
            clock.now = at
        return order_service.create_order(
            OrderInput(
                student_name=student_name,
                files=list(files),
                payment_method=payment_method,
                amount=amount,
                **extra,
            )
        )

    return _make


# Flask app fixtures

@pytest.fixture
def print_sink():
    return StubPrintSink()


@pytest.fixture
def payment_gateway():
    return PaymentGatewayStub()


@pytest.fixture
def app(tmp_path, print_sink, payment_gateway):
    flask_app = create_app({
        "TESTING": True,
        "DATABASE_URL": f"sqlite:///{tmp_path / 'app.sqlite'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "SECRET_KEY": "test-secret",
        "ADMIN_USERNAME": "admin",
        "ADMIN_PASSWORD": "1234",
        "PRINT_SINK_INSTANCE": print_sink,
        "PAYMENT_GATEWAY_INSTANCE": payment_gateway,
    })
    yield flask_app
    flask_app.config["CLEANUP"]()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/login", json={"username": "admin", "password": "1234"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def upload_order(client):
    """Place an order through POST /api/upload and return the response."""

    def _upload(files=(("a.pdf", b"%PDF-1.4 test"),), **fields):
        form = {"studentName": "Asha", **fields}
        form["files"] = [(io.BytesIO(content), name) for name, content in files]
        return client.post("/api/upload", data=form, content_type="multipart/form-data")

    return _upload
