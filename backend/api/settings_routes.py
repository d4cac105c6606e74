"""Admin settings endpoints: dealership info, working hours, user roles."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from backend.database.db import get_db
from backend.database.models import DayOfWeek, User, UserRole
from backend.api.auth import get_current_user_required
from backend.services.settings_service import (
    get_dealership_info,
    get_users,
    save_working_hours,
    update_user_role,
)

settings_router = APIRouter(prefix="/settings", tags=["settings"])


# --- Request Models ---

class WorkingHourRequest(BaseModel):
    day_of_week: DayOfWeek = Field(..., alias="dayOfWeek")
    open_time: str = Field(..., alias="openTime", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    close_time: str = Field(..., alias="closeTime", pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    is_open: bool = Field(True, alias="isOpen")

    model_config = {"populate_by_name": True}


class SaveWorkingHoursRequest(BaseModel):
    working_hours: list[WorkingHourRequest] = Field(..., alias="workingHours", max_length=7)

    model_config = {"populate_by_name": True}


class UpdateRoleRequest(BaseModel):
    role: UserRole


# --- Endpoints ---

@settings_router.get("/dealership")
def dealership_info(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Dealership details with working hours; created with defaults on first read."""
    return {"success": True, "data": get_dealership_info(db)}


@settings_router.put("/working-hours")
def replace_working_hours(
    req: SaveWorkingHoursRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Replace every working hour row. Admin only."""
    hours = [h.model_dump() for h in req.working_hours]
    return {"success": True, "data": save_working_hours(current_user, hours, db)}


@settings_router.get("/users")
def list_users(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": get_users(current_user, db)}


@settings_router.patch("/users/{user_id}/role")
def change_user_role(
    user_id: str,
    req: UpdateRoleRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Promote or demote a user. Admin only."""
    return {"success": True, "data": update_user_role(current_user, user_id, req.role.value, db)}
