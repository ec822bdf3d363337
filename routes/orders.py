"""
Order routes.

Student-facing:
- POST /api/upload                  - Upload files and place an order
- GET  /api/orders/student?name=    - A student's orders, newest first
- GET  /api/orders/<id>             - A single order

Staff (admin capability):
- GET  /api/orders                  - All orders, newest first
- POST /api/orders/<id>/complete    - Mark an order completed
- POST /api/orders/<id>/print       - Send an order's files to the printer
- GET  /api/dispatches/<id>         - Per-file outcome of a print request
"""

from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

from flask import Blueprint, current_app, request
from werkzeug.utils import secure_filename

from core.exceptions import NotFoundError, ValidationError
from models.order import OrderInput
from logging_config import get_logger
from .helpers import admin_required, service


# Module logger
logger = get_logger(__name__)

orders_bp = Blueprint("orders", __name__)

# Prefix of stored file references (the upload folder is served under it)
UPLOAD_REF_PREFIX = "uploads"
MAX_NAME_LENGTH = 120  # of the sanitised upload name kept on disk


def _store_uploads(uploads) -> list:
    """
    Write uploaded files to the upload folder.

    Files land on disk before the order row exists; if the insert then
    fails the files stay behind unreferenced.

    Returns:
        Stored file references, in upload order
    """
    upload_folder = Path(current_app.config["UPLOAD_FOLDER"])
    upload_folder.mkdir(parents=True, exist_ok=True)

    millis = int(datetime.now(timezone.utc).timestamp() * 1000)
    refs = []
    for upload in uploads:
        safe_name = secure_filename(upload.filename)[-MAX_NAME_LENGTH:] or "upload"
        stored_name = f"{millis}-{uuid4().hex[:6]}-{safe_name}"
        upload.save(upload_folder / stored_name)
        logger.info(f"Saved uploaded file: {stored_name}")
        refs.append(f"{UPLOAD_REF_PREFIX}/{stored_name}")
    return refs


@orders_bp.route("/api/upload", methods=["POST"])
def upload():
    """Place an order: 1-10 files in the "files" field plus print preferences."""
    order_service = service("ORDER_SERVICE")

    uploads = [f for f in request.files.getlist("files") if f and f.filename]
    if not request.form.get("studentName", "").strip() or not uploads:
        raise ValidationError("Missing studentName or files")
    if len(uploads) > order_service.max_files:
        raise ValidationError(f"Too many files: at most {order_service.max_files} per order")

    refs = _store_uploads(uploads)
    order = order_service.create_order(OrderInput.from_dict(request.form, refs))

    return {"message": "Upload successful", "orderId": order.id}


@orders_bp.route("/api/orders/student", methods=["GET"])
def student_orders():
    orders = service("ORDER_SERVICE").list_orders_by_student(request.args.get("name"))
    return [o.to_dict() for o in orders]


@orders_bp.route("/api/orders/<int:order_id>", methods=["GET"])
def get_order(order_id: int):
    return service("ORDER_SERVICE").get_order(order_id).to_dict()


@orders_bp.route("/api/orders", methods=["GET"])
@admin_required
def list_orders():
    return [o.to_dict() for o in service("ORDER_SERVICE").list_all_orders()]


@orders_bp.route("/api/orders/<int:order_id>/complete", methods=["POST"])
@admin_required
def complete_order(order_id: int):
    order = service("ORDER_SERVICE").mark_completed(order_id)
    return {"message": "Order marked as completed", "order": order.to_dict()}


@orders_bp.route("/api/orders/<int:order_id>/print", methods=["POST"])
@admin_required
def print_order(order_id: int):
    """
    Start printing an order's files.

    Answers 202 as soon as the files are handed to the dispatch thread;
    the print outcome is available from /api/dispatches/<dispatchId>.
    """
    ticket = service("DISPATCH_SERVICE").dispatch_print(order_id)
    return {"message": "Print job(s) sent", **ticket.to_dict()}, 202


@orders_bp.route("/api/dispatches/<dispatch_id>", methods=["GET"])
@admin_required
def get_dispatch(dispatch_id: str):
    result = service("DISPATCH_SERVICE").get_dispatch(dispatch_id)
    if result is None:
        raise NotFoundError("Dispatch", dispatch_id)
    return result.to_dict()
