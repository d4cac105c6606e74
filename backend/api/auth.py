"""FastAPI auth dependencies for resolving the caller from identity provider tokens."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from backend.database.db import get_db
from backend.database.models import User
from backend.services.auth_service import decode_identity_token, get_user_by_external_id
from backend.services.errors import UnauthorizedError


def _extract_token(request: Request) -> str | None:
    """Extract Bearer token from Authorization header."""
    auth = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        return None
    return auth[7:]


def get_identity_claims(request: Request) -> dict | None:
    """Verified identity token claims, or None for anonymous callers."""
    token = _extract_token(request)
    if not token:
        return None
    return decode_identity_token(token)


def get_identity_claims_required(request: Request) -> dict:
    token = _extract_token(request)
    if not token:
        raise UnauthorizedError("Unauthorized")
    claims = decode_identity_token(token)
    if not claims:
        raise UnauthorizedError("Invalid or expired token")
    return claims


def get_current_user_optional(
    claims: dict | None = Depends(get_identity_claims), db: Session = Depends(get_db)
) -> User | None:
    """Returns the caller's user record or None. For endpoints open to anonymous users."""
    if not claims:
        return None
    return get_user_by_external_id(claims["sub"], db)


def get_current_user_required(
    claims: dict = Depends(get_identity_claims_required), db: Session = Depends(get_db)
) -> User:
    """Returns the caller's user record or raises 401.

    The record, including its role, is read from the database on every
    request; nothing in the token other than ``sub`` is trusted.
    """
    user = get_user_by_external_id(claims["sub"], db)
    if not user:
        raise UnauthorizedError("User not found")
    return user
