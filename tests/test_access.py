"""
Unit tests for the admin access gate.
"""

from unittest.mock import patch

import pytest
from itsdangerous import SignatureExpired

from core.access import AccessGate, Capability
from core.exceptions import UnauthorizedError


@pytest.fixture
def gate():
    return AccessGate("test-secret", "admin", "1234", max_age_seconds=60)


class TestLogin:
    """Credential exchange."""

    def test_valid_credentials_return_token(self, gate):
        token = gate.login("admin", "1234")
        assert isinstance(token, str)
        assert token

    @pytest.mark.parametrize("username, password", [
        ("admin", "wrong"),
        ("root", "1234"),
        ("", ""),
        (None, None),
        (1, "1234"),
        ("admin", 1234),
        (["admin"], {"p": 1}),
    ])
    def test_invalid_credentials(self, gate, username, password):
        with pytest.raises(UnauthorizedError) as exc_info:
            gate.login(username, password)
        assert exc_info.value.status_code == 401


class TestCapabilityFromToken:
    """Token decoding."""

    def test_round_trip(self, gate):
        capability = gate.capability_from_token(gate.login("admin", "1234"))
        assert capability.is_admin
        assert capability.subject == "admin"

    def test_missing_token(self, gate):
        assert gate.capability_from_token(None) == Capability.anonymous()

    def test_tampered_token(self, gate):
        token = gate.login("admin", "1234")
        tampered = token[:-2] + ("AA" if not token.endswith("AA") else "BB")
        assert not gate.capability_from_token(tampered).is_admin

    def test_token_from_other_secret(self, gate):
        other = AccessGate("other-secret", "admin", "1234")
        assert not gate.capability_from_token(other.login("admin", "1234")).is_admin

    def test_expired_token(self, gate):
        token = gate.login("admin", "1234")
        with patch.object(gate._serializer, "loads", side_effect=SignatureExpired("expired")):
            assert not gate.capability_from_token(token).is_admin


class TestRequireAdmin:

    def test_admin_passes(self, gate):
        gate.require_admin(Capability(is_admin=True, subject="admin"))

    @pytest.mark.parametrize("capability", [None, Capability.anonymous()])
    def test_non_admin_rejected(self, gate, capability):
        with pytest.raises(UnauthorizedError):
            gate.require_admin(capability)
