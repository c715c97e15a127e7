"""
Caller identity.

Authentication happens upstream; the gateway forwards the authenticated user
in request headers (names configurable via API_USER_ID_HEADER and
API_USER_ROLE_HEADER).
"""

from fastapi import Request

from buildstock.config import get_settings
from buildstock.core.entities.identity import Caller, UserRole
from buildstock.core.exceptions import UnauthenticatedError


def get_current_caller(request: Request) -> Caller:
    """Resolve the caller from identity headers or raise UnauthenticatedError."""
    settings = get_settings()
    user_id = (request.headers.get(settings.api.user_id_header) or "").strip()
    if not user_id:
        raise UnauthenticatedError(f"Missing {settings.api.user_id_header} header")

    raw_role = (request.headers.get(settings.api.user_role_header) or "").strip().upper()
    try:
        role = UserRole(raw_role) if raw_role else UserRole.USER
    except ValueError:
        raise UnauthenticatedError(f"Unknown role: {raw_role}") from None

    return Caller(user_id=user_id, role=role)
