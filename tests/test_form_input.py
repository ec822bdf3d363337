"""
Unit tests for form input helpers.
"""

import pytest

from models.order import OrderInput, PaymentMethod
from modules.form_input import parse_int, parse_optional_int, sanitize_text


class TestParseInt:
    """Permissive integer parsing."""

    @pytest.mark.parametrize("raw, expected", [
        ("50", 50),
        (" 7 ", 7),
        ("12.9", 12),
        ("3 copies", 3),
        (42, 42),
    ])
    def test_reads_leading_integer(self, raw, expected):
        assert parse_int(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "abc", "x12", [], {}, True])
    def test_unparsable_becomes_zero(self, raw):
        assert parse_int(raw) == 0

    def test_negative_becomes_zero(self):
        assert parse_int("-5") == 0
        assert parse_optional_int("-5") == -5

    def test_optional_returns_none_when_unparsable(self):
        assert parse_optional_int("abc") is None
        assert parse_optional_int(None) is None


class TestSanitizeText:
    """Markup stripping and trimming."""

    def test_strips_tags_and_whitespace(self):
        assert sanitize_text("  <b>Asha</b> ") == "Asha"

    def test_none_is_empty(self):
        assert sanitize_text(None) == ""

    def test_ampersand_kept_as_typed(self):
        assert sanitize_text("Tom & Jerry") == "Tom & Jerry"
        assert sanitize_text("B&1 <i>x</i>") == "B&1 x"
        assert sanitize_text("a < b") == "a < b"

    def test_truncates(self):
        assert sanitize_text("abcdef", max_length=3) == "abc"


class TestOrderInputFromDict:
    """Coercion of a raw upload form."""

    def test_coerces_every_field(self):
        form = {
            "studentName": "Asha",
            "studentId": "17",
            "paymentMethod": "online",
            "amount": "50",
            "pages": "ten",
            "copies": "2",
            "bin": "B4",
            "lunchTime": "13:00",
            "printType": "bw",
            "sides": "double",
        }
        order_input = OrderInput.from_dict(form, ["uploads/a.pdf"])

        assert order_input.student_name == "Asha"
        assert order_input.student_id == 17
        assert order_input.payment_method == PaymentMethod.ONLINE
        assert order_input.amount == 50
        assert order_input.pages == 0
        assert order_input.copies == 2
        assert order_input.bin == "B4"
        assert order_input.lunch_time == "13:00"
        assert order_input.print_type == "bw"
        assert order_input.sides == "double"
        assert order_input.files == ["uploads/a.pdf"]

    def test_unknown_payment_method_is_cash(self):
        order_input = OrderInput.from_dict({"studentName": "Asha", "paymentMethod": "card"}, [])
        assert order_input.payment_method == PaymentMethod.CASH

    def test_missing_optional_fields_are_none(self):
        order_input = OrderInput.from_dict({"studentName": "Asha"}, [])
        assert order_input.student_id is None
        assert order_input.bin is None
        assert order_input.amount == 0
