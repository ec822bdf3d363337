"""
Student registry: sign-up, login and profile lookup.

Passwords are stored only as salted one-way hashes (werkzeug.security)
and checked with a constant-time comparison.
"""

from __future__ import annotations

from typing import Any, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from core.ledger_store import LedgerStore
from models.student import Student
from modules.form_input import sanitize_text
from logging_config import get_logger


logger = get_logger(__name__)


def normalize_email(email: Any) -> str:
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


class StudentService:
    """Registers and authenticates students against the ledger store."""

    def __init__(self, store: LedgerStore):
        self._store = store

    def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        department: Optional[str] = None,
        year: Optional[str] = None,
        rollno: Optional[str] = None,
    ) -> Student:
        """
        Create a student account.

        Raises:
            ValidationError: If name, email or password is missing
            ConflictError: If the email is already registered
        """
        name = sanitize_text(name, max_length=200)
        email = normalize_email(email)
        if not name or not email or not isinstance(password, str) or not password:
            raise ValidationError("Name, email, and password are required")

        student = Student(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            department=sanitize_text(department) or None,
            year=sanitize_text(year) or None,
            rollno=sanitize_text(rollno) or None,
        )
        student = self._store.add_student(student)
        logger.info(f"Student {student.id} registered")
        return student

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Student:
        """
        Raises:
            ValidationError: If email or password is missing
            UnauthorizedError: If no student matches the credentials
        """
        email = normalize_email(email)
        if not email or not isinstance(password, str) or not password:
            raise ValidationError("Email and password are required")

        student = self._store.get_student_by_email(email)
        if student is None or not check_password_hash(student.password_hash, password):
            logger.info("Student login rejected")
            raise UnauthorizedError("Invalid email or password")

        return student

    def get_profile(self, student_id: int) -> Student:
        """
        Raises:
            NotFoundError: If the student does not exist
        """
        student = self._store.get_student(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        return student
