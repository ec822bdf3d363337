"""
HTTP tests for the Flask routes.

The app runs against a SQLite file in tmp_path, with a StubPrintSink and a
PaymentGatewayStub injected through config overrides.
"""

from pathlib import Path

import pytest


ADMIN_GET_ROUTES = [
    "/api/orders",
    "/api/stats",
    "/api/daily-payments",
    "/api/orders-filtered",
    "/api/dispatches/abc",
]


class TestUpload:
    """POST /api/upload"""

    def test_creates_pending_order(self, client, upload_order, app):
        response = upload_order(
            files=(("notes.pdf", b"%PDF-1.4 a"), ("lab.pdf", b"%PDF-1.4 b")),
            paymentMethod="online",
            amount="40",
            copies="2",
        )

        assert response.status_code == 200
        body = response.get_json()
        assert body["message"] == "Upload successful"

        order = client.get(f"/api/orders/{body['orderId']}").get_json()
        assert order["studentName"] == "Asha"
        assert order["status"] == "pending"
        assert order["paymentMethod"] == "online"
        assert order["amount"] == 40
        assert order["copies"] == 2
        assert len(order["filePaths"]) == 2

        upload_folder = Path(app.config["UPLOAD_FOLDER"])
        for ref in order["filePaths"]:
            assert ref.startswith("uploads/")
            assert (upload_folder / Path(ref).name).is_file()

    def test_missing_student_name(self, upload_order, app):
        response = upload_order(studentName="")
        assert response.status_code == 400
        assert response.get_json()["error"] == "Missing studentName or files"
        assert app.config["LEDGER_STORE"].count_orders() == 0

    def test_missing_files(self, client, app):
        response = client.post("/api/upload", data={"studentName": "Asha"})
        assert response.status_code == 400
        assert app.config["LEDGER_STORE"].count_orders() == 0

    def test_too_many_files(self, upload_order, app):
        files = tuple((f"{i}.pdf", b"x") for i in range(11))
        response = upload_order(files=files)
        assert response.status_code == 400
        assert app.config["LEDGER_STORE"].count_orders() == 0

    def test_unsafe_file_name(self, client, upload_order):
        response = upload_order(files=(("../../evil.pdf", b"x"),))
        order = client.get(f"/api/orders/{response.get_json()['orderId']}").get_json()
        assert ".." not in order["filePaths"][0]


class TestStudentOrders:
    """GET /api/orders/student"""

    def test_lists_newest_first(self, client, upload_order):
        first = upload_order().get_json()["orderId"]
        upload_order(studentName="Ravi")
        second = upload_order().get_json()["orderId"]

        response = client.get("/api/orders/student?name=Asha")
        assert response.status_code == 200
        assert [o["id"] for o in response.get_json()] == [second, first]

    def test_name_with_ampersand_round_trips(self, client, upload_order):
        order_id = upload_order(studentName="Tom & Jerry", bin="B&1").get_json()["orderId"]

        order = client.get(f"/api/orders/{order_id}").get_json()
        assert order["studentName"] == "Tom & Jerry"
        assert order["bin"] == "B&1"

        listed = client.get("/api/orders/student", query_string={"name": "Tom & Jerry"}).get_json()
        assert [o["id"] for o in listed] == [order_id]

    def test_requires_name(self, client):
        assert client.get("/api/orders/student").status_code == 400

    def test_unknown_order(self, client):
        response = client.get("/api/orders/999")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Order not found"

    def test_order_id_beyond_integer_range(self, client):
        assert client.get("/api/orders/99999999999999999999").status_code == 404


class TestAdminAccess:
    """Admin login and the capability check."""

    @pytest.mark.parametrize("route", ADMIN_GET_ROUTES)
    def test_admin_routes_reject_anonymous(self, client, route):
        response = client.get(route)
        assert response.status_code == 401
        assert response.get_json()["error"] == "Unauthorized"

    def test_bad_token_rejected(self, client):
        response = client.get("/api/stats", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    @pytest.mark.parametrize("credentials", [
        {"username": 1, "password": "1234"},
        {"username": "admin", "password": 1234},
        {"username": None, "password": ["1234"]},
    ])
    def test_login_with_non_string_credentials(self, client, credentials):
        assert client.post("/api/login", json=credentials).status_code == 401

    def test_bad_login(self, client):
        response = client.post("/api/login", json={"username": "admin", "password": "x"})
        assert response.status_code == 401
        assert "token" not in response.get_json()

    def test_login_with_form_fields(self, client):
        response = client.post("/api/login", data={"username": "admin", "password": "1234"})
        assert response.status_code == 200
        assert response.get_json()["expiresIn"] > 0

    def test_complete_requires_admin(self, client, upload_order):
        order_id = upload_order().get_json()["orderId"]
        assert client.post(f"/api/orders/{order_id}/complete").status_code == 401
        assert client.get(f"/api/orders/{order_id}").get_json()["status"] == "pending"


class TestCompleteOrder:
    """POST /api/orders/<id>/complete"""

    def test_marks_completed(self, client, upload_order, admin_headers):
        order_id = upload_order().get_json()["orderId"]

        response = client.post(f"/api/orders/{order_id}/complete", headers=admin_headers)

        assert response.status_code == 200
        body = response.get_json()
        assert body["message"] == "Order marked as completed"
        assert body["order"]["status"] == "completed"

    def test_unknown_order(self, client, admin_headers):
        response = client.post("/api/orders/999/complete", headers=admin_headers)
        assert response.status_code == 404

    def test_list_all_orders(self, client, upload_order, admin_headers):
        upload_order()
        upload_order(studentName="Ravi")
        response = client.get("/api/orders", headers=admin_headers)
        assert [o["studentName"] for o in response.get_json()] == ["Ravi", "Asha"]


class TestPrintOrder:
    """POST /api/orders/<id>/print and GET /api/dispatches/<id>"""

    def test_dispatch_and_poll(self, client, app, upload_order, admin_headers, print_sink):
        order_id = upload_order(files=(("a.pdf", b"x"), ("b.pdf", b"y"))).get_json()["orderId"]

        response = client.post(f"/api/orders/{order_id}/print", headers=admin_headers)

        assert response.status_code == 202
        ticket = response.get_json()
        assert ticket["message"] == "Print job(s) sent"
        assert ticket["orderId"] == order_id
        assert len(ticket["files"]) == 2

        app.config["DISPATCH_SERVICE"].wait(ticket["dispatchId"], timeout=5)
        result = client.get(f"/api/dispatches/{ticket['dispatchId']}", headers=admin_headers)
        assert result.status_code == 200
        assert result.get_json()["status"] == "sent"
        assert len(print_sink.submitted) == 2

        # Printing never completes an order
        assert client.get(f"/api/orders/{order_id}").get_json()["status"] == "pending"

    def test_missing_file(self, client, app, upload_order, admin_headers, print_sink):
        order_id = upload_order().get_json()["orderId"]
        order = client.get(f"/api/orders/{order_id}").get_json()
        upload_folder = Path(app.config["UPLOAD_FOLDER"])
        (upload_folder / Path(order["filePaths"][0]).name).unlink()

        response = client.post(f"/api/orders/{order_id}/print", headers=admin_headers)

        assert response.status_code == 404
        assert response.get_json()["error"].startswith("File not found")
        assert print_sink.submitted == []

    def test_unknown_order(self, client, admin_headers):
        assert client.post("/api/orders/999/print", headers=admin_headers).status_code == 404

    def test_huge_order_id(self, client, admin_headers):
        huge = 10 ** 20
        assert client.post(f"/api/orders/{huge}/print", headers=admin_headers).status_code == 404
        assert client.post(f"/api/orders/{huge}/complete", headers=admin_headers).status_code == 404

    def test_unknown_dispatch(self, client, admin_headers):
        assert client.get("/api/dispatches/nope", headers=admin_headers).status_code == 404


class TestStats:
    """Dashboard statistics."""

    def test_global_stats(self, client, upload_order, admin_headers):
        first = upload_order(amount="30").get_json()["orderId"]
        upload_order(amount="20", paymentMethod="online")
        client.post(f"/api/orders/{first}/complete", headers=admin_headers)

        stats = client.get("/api/stats", headers=admin_headers).get_json()
        assert stats == {
            "total": 2,
            "pending": 1,
            "completed": 1,
            "onlinePaid": 1,
            "cashPaid": 1,
            "totalEarned": 30,
        }

    def test_daily_payments_today(self, client, upload_order, admin_headers):
        upload_order(amount="30")
        upload_order(amount="20", paymentMethod="online")

        body = client.get("/api/daily-payments", headers=admin_headers).get_json()
        assert body["cashCount"] + body["onlineCount"] == 2
        assert body["cashTotal"] == 30
        assert body["onlineTotal"] == 20

    def test_daily_payments_other_day(self, client, upload_order, admin_headers):
        upload_order(amount="30")
        body = client.get("/api/daily-payments?date=2001-01-01", headers=admin_headers).get_json()
        assert body["date"] == "2001-01-01"
        assert body["cashCount"] == 0

    def test_daily_payments_bad_date(self, client, admin_headers):
        response = client.get("/api/daily-payments?date=yesterday", headers=admin_headers)
        assert response.status_code == 400

    def test_daily_payments_last_calendar_day(self, client, admin_headers):
        response = client.get("/api/daily-payments?date=9999-12-31", headers=admin_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("range_kind", ["today", "week", "month"])
    def test_orders_filtered(self, client, upload_order, admin_headers, range_kind):
        upload_order(amount="15")
        body = client.get(f"/api/orders-filtered?filter={range_kind}", headers=admin_headers).get_json()
        assert body["filter"] == range_kind
        assert body["cashCount"] == 1
        assert body["cashTotal"] == 15

    def test_orders_filtered_default(self, client, admin_headers):
        body = client.get("/api/orders-filtered", headers=admin_headers).get_json()
        assert body["filter"] == "today"

    def test_orders_filtered_invalid(self, client, admin_headers):
        response = client.get("/api/orders-filtered?filter=decade", headers=admin_headers)
        assert response.status_code == 400
        assert response.get_json()["error"] == "Invalid filter"


class TestStudents:
    """Student account routes."""

    def test_register_login_profile(self, client):
        registered = client.post("/api/register", json={
            "name": "Asha",
            "email": "asha@example.com",
            "password": "s3cret",
            "department": "Physics",
        })
        assert registered.status_code == 200
        student_id = registered.get_json()["studentId"]

        login = client.post("/api/student/login", json={"email": "asha@example.com", "password": "s3cret"})
        assert login.status_code == 200
        assert login.get_json()["studentId"] == student_id
        assert login.get_json()["name"] == "Asha"

        profile = client.get(f"/api/student/profile/{student_id}").get_json()
        assert profile["department"] == "Physics"
        assert "passwordHash" not in profile

    def test_duplicate_email(self, client):
        payload = {"name": "Asha", "email": "asha@example.com", "password": "pw"}
        client.post("/api/register", json=payload)
        response = client.post("/api/register", json=payload)
        assert response.status_code == 409
        assert response.get_json()["error"] == "Email already exists"

    def test_register_missing_fields(self, client):
        response = client.post("/api/register", json={"name": "Asha"})
        assert response.status_code == 400

    def test_register_non_string_password(self, client, app):
        response = client.post("/api/register", json={"name": "Asha", "email": "a@example.com", "password": 1234})
        assert response.status_code == 400
        assert app.config["LEDGER_STORE"].count_students() == 0

    def test_student_profile_beyond_integer_range(self, client):
        assert client.get("/api/student/profile/99999999999999999999").status_code == 404

    def test_wrong_password(self, client):
        client.post("/api/register", json={"name": "Asha", "email": "asha@example.com", "password": "pw"})
        response = client.post("/api/student/login", json={"email": "asha@example.com", "password": "no"})
        assert response.status_code == 401

    def test_unknown_profile(self, client):
        assert client.get("/api/student/profile/42").status_code == 404


class TestAdminReset:
    """POST /api/reset-db"""

    def test_clears_orders(self, client, upload_order, admin_headers, app):
        upload_order()
        upload_order()

        response = client.post("/api/reset-db", headers=admin_headers)

        assert response.status_code == 200
        assert response.get_json()["removed"] == 2
        assert app.config["LEDGER_STORE"].count_orders() == 0

    def test_requires_admin(self, client, upload_order, app):
        upload_order()
        assert client.post("/api/reset-db").status_code == 401
        assert app.config["LEDGER_STORE"].count_orders() == 1


class TestPayments:
    """POST /api/create-payment"""

    def test_creates_gateway_order(self, client, payment_gateway):
        response = client.post("/api/create-payment", json={"amount": 50, "studentName": "Asha"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["orderId"].startswith("order_STUB")
        assert body["amount"] == 5000
        assert payment_gateway.created[0]["receipt"].startswith("rcpt_")

    @pytest.mark.parametrize("amount", [None, 0, "abc"])
    def test_amount_required(self, client, payment_gateway, amount):
        response = client.post("/api/create-payment", json={"amount": amount})
        assert response.status_code == 400
        assert response.get_json()["error"] == "Amount required"
        assert payment_gateway.created == []


class TestHealth:

    def test_healthy(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json()["checks"]["database"] == "ok"

    def test_unknown_route_is_json(self, client):
        response = client.get("/no-such-route")
        assert response.status_code == 404
        assert response.get_json()["error"] == "Not Found"
