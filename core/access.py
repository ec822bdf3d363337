"""
Admin access gate.

A single yes/no capability: the caller is shop staff or it is not. Staff
log in once and receive a signed, time-limited token. Each request carries
the token explicitly (Authorization: Bearer <token>); the HTTP layer turns
it into a Capability once per request and every admin-only operation asks
the gate whether that capability is sufficient.

The gate knows nothing about cookies or sessions; any transport that can
carry a string can carry the capability.
"""

from __future__ import annotations

import hmac
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from logging_config import get_logger
from .exceptions import UnauthorizedError


logger = get_logger(__name__)

TOKEN_SALT = "print-shop-admin-capability"


@dataclass(frozen=True)
class Capability:
    """What the current caller is allowed to do."""

    is_admin: bool = False
    subject: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Capability":
        return cls()


class AccessGate:
    """
    Issues and checks admin capability tokens.

    Attributes:
        max_age_seconds: Token lifetime
    """

    def __init__(
        self,
        secret_key: str,
        admin_username: str,
        admin_password: str,
        max_age_seconds: int = 24 * 60 * 60,
    ):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=TOKEN_SALT)
        self._admin_username = admin_username
        self._admin_password = admin_password
        self.max_age_seconds = max_age_seconds

    def login(self, username: Optional[str], password: Optional[str]) -> str:
        """
        Exchange admin credentials for a capability token.

        Raises:
            UnauthorizedError: If the credentials do not match
        """
        if not isinstance(username, str) or not isinstance(password, str):
            logger.warning("Admin login rejected: credentials must be strings")
            raise UnauthorizedError("Invalid username or password")

        user_ok = hmac.compare_digest(username.encode(), self._admin_username.encode())
        pass_ok = hmac.compare_digest(password.encode(), self._admin_password.encode())
        if not (user_ok and pass_ok):
            logger.warning("Admin login rejected")
            raise UnauthorizedError("Invalid username or password")

        logger.info(f"Admin login: {username}")
        return self._serializer.dumps({"sub": username, "admin": True})

    def capability_from_token(self, token: Optional[str]) -> Capability:
        """
        Decode a token into a Capability.

        Missing, tampered and expired tokens all yield an anonymous
        capability; the gate decides later whether that matters.
        """
        if not token:
            return Capability.anonymous()

        try:
            payload = self._serializer.loads(token, max_age=self.max_age_seconds)
        except SignatureExpired:
            logger.info("Admin token expired")
            return Capability.anonymous()
        except BadSignature:
            logger.warning("Admin token with bad signature")
            return Capability.anonymous()

        if not isinstance(payload, dict):
            return Capability.anonymous()
        return Capability(is_admin=payload.get("admin") is True, subject=payload.get("sub"))

    @staticmethod
    def is_admin(capability: Optional[Capability]) -> bool:
        return capability is not None and capability.is_admin

    def require_admin(self, capability: Optional[Capability]) -> None:
        """
        Raises:
            UnauthorizedError: If capability is not an admin capability
        """
        if not self.is_admin(capability):
            raise UnauthorizedError()
