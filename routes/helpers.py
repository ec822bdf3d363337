"""
Shared request helpers for route blueprints.

- load_capability: before_request hook turning the bearer token into g.capability
- admin_required: decorator applying the access gate to a view
- request_data: JSON body or form fields, whichever the client sent
- service: typed-ish lookup of services registered in app.config
"""

from functools import wraps

from flask import current_app, g, request

from core.access import Capability


def bearer_token():
    """Token from "Authorization: Bearer <token>", or None."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def load_capability():
    """Resolve the caller's capability once per request."""
    gate = current_app.config["ACCESS_GATE"]
    g.capability = gate.capability_from_token(bearer_token())


def current_capability() -> Capability:
    return g.get("capability") or Capability.anonymous()


def admin_required(view):
    """Reject the request with 401 unless the caller holds the admin capability."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        current_app.config["ACCESS_GATE"].require_admin(current_capability())
        return view(*args, **kwargs)

    return wrapped


def request_data():
    """Request fields from a JSON body, falling back to form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def service(name: str):
    """Fetch a service registered on the app, e.g. service("ORDER_SERVICE")."""
    return current_app.config[name]
