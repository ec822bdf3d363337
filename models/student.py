"""Registered student accounts."""

from __future__ import annotations

from typing import Dict, Any

from sqlalchemy import Column, DateTime, Integer, String

from .base import Base, utc_now


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    department = Column(String(200), nullable=True)
    year = Column(String(50), nullable=True)
    rollno = Column(String(100), nullable=True)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)  # salted hash, never plaintext
    created_at = Column(DateTime, nullable=False, default=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Public profile; the password hash is never included."""
        return {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "year": self.year,
            "rollno": self.rollno,
            "email": self.email,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<Student id={self.id} email={self.email!r}>"
