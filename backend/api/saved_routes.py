"""Saved car (wishlist) endpoints; all require authentication."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.database.db import get_db
from backend.database.models import User
from backend.api.auth import get_current_user_required
from backend.services.wishlist_service import get_saved_cars

saved_router = APIRouter(prefix="/saved", tags=["saved"])


@saved_router.get("")
def list_saved(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """List all saved cars for the current user, most recently saved first."""
    return {"success": True, "data": get_saved_cars(current_user, db)}
