"""Auth endpoints: sync the local user record from the identity provider, me."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.database.db import get_db
from backend.api.auth import get_current_user_required, get_identity_claims_required
from backend.database.models import User
from backend.services.auth_service import sync_user
from backend.services.serialization import serialize_user

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post("/sync")
def sync(
    claims: dict = Depends(get_identity_claims_required),
    db: Session = Depends(get_db),
):
    """Create or refresh the local user for the signed-in identity."""
    user = sync_user(claims, db)
    return {"success": True, "data": serialize_user(user)}


@auth_router.get("/me")
def get_me(current_user: User = Depends(get_current_user_required)):
    """Return the currently authenticated user's profile."""
    return {"success": True, "data": serialize_user(current_user)}
