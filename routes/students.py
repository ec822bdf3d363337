"""
Student account routes.

- POST /api/register              - Create an account
- POST /api/student/login         - Check credentials
- GET  /api/student/profile/<id>  - Public profile
"""

from flask import Blueprint

from logging_config import get_logger
from .helpers import request_data, service


# Module logger
logger = get_logger(__name__)

students_bp = Blueprint("students", __name__)


@students_bp.route("/api/register", methods=["POST"])
def register():
    data = request_data()
    student = service("STUDENT_SERVICE").register(
        name=data.get("name"),
        email=data.get("email"),
        password=data.get("password"),
        department=data.get("department"),
        year=data.get("year"),
        rollno=data.get("rollno"),
    )
    return {"message": "Student registered successfully", "studentId": student.id}


@students_bp.route("/api/student/login", methods=["POST"])
def login():
    data = request_data()
    student = service("STUDENT_SERVICE").authenticate(data.get("email"), data.get("password"))
    return {"message": "Login successful", "studentId": student.id, "name": student.name}


@students_bp.route("/api/student/profile/<int:student_id>", methods=["GET"])
def profile(student_id: int):
    return service("STUDENT_SERVICE").get_profile(student_id).to_dict()
