"""
Admin settings: dealership working hours and user roles.

Every privileged operation checks the role on the caller's own ``User`` row,
which the auth dependency loads fresh from the database for each request.
"""

import logging
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from backend.database.models import (
    DEALERSHIP_ID,
    DayOfWeek,
    DealershipInfo,
    User,
    UserRole,
    WorkingHour,
)
from backend.services.errors import (
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
    ValidationError,
)
from backend.services.serialization import serialize_dealership, serialize_user

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

DEFAULT_WORKING_HOURS = [
    {"day_of_week": DayOfWeek.MONDAY, "open_time": "09:00", "close_time": "18:00", "is_open": True},
    {"day_of_week": DayOfWeek.TUESDAY, "open_time": "09:00", "close_time": "18:00", "is_open": True},
    {"day_of_week": DayOfWeek.WEDNESDAY, "open_time": "09:00", "close_time": "18:00", "is_open": True},
    {"day_of_week": DayOfWeek.THURSDAY, "open_time": "09:00", "close_time": "18:00", "is_open": True},
    {"day_of_week": DayOfWeek.FRIDAY, "open_time": "09:00", "close_time": "18:00", "is_open": True},
    {"day_of_week": DayOfWeek.SATURDAY, "open_time": "10:00", "close_time": "16:00", "is_open": True},
    {"day_of_week": DayOfWeek.SUNDAY, "open_time": "10:00", "close_time": "16:00", "is_open": False},
]


def require_admin(user: User | None) -> User:
    if user is None:
        raise UnauthorizedError("Unauthorized")
    if user.role != UserRole.ADMIN:
        raise ForbiddenError("Unauthorized: Admin access required")
    return user


def _load_dealership(db: Session) -> DealershipInfo | None:
    return (
        db.query(DealershipInfo)
        .options(selectinload(DealershipInfo.working_hours))
        .filter(DealershipInfo.id == DEALERSHIP_ID)
        .first()
    )


def get_dealership_info(db: Session) -> dict:
    """Return the dealership with its hours, creating the default row on first read."""
    dealership = _load_dealership(db)
    if dealership is None:
        dealership = DealershipInfo(
            id=DEALERSHIP_ID,
            working_hours=[WorkingHour(**hours) for hours in DEFAULT_WORKING_HOURS],
        )
        db.add(dealership)
        try:
            db.commit()
            logger.info("Created default dealership record with standard working hours")
        except IntegrityError:
            # Another request created it first
            db.rollback()
        dealership = _load_dealership(db)
        if dealership is None:
            logger.error("Dealership record missing after create attempt")
            raise UpstreamError("Failed to load dealership info")

    return serialize_dealership(dealership)


def _validate_working_hours(hours: list[dict]) -> list[dict]:
    cleaned = []
    seen = set()
    for entry in hours:
        try:
            day = DayOfWeek(entry["day_of_week"])
        except (KeyError, ValueError):
            raise ValidationError(f"Invalid day of week: {entry.get('day_of_week')!r}")
        if day in seen:
            raise ValidationError(f"Duplicate working hours for {day.value}")
        seen.add(day)

        open_time = entry.get("open_time") or ""
        close_time = entry.get("close_time") or ""
        if not _TIME_RE.match(open_time) or not _TIME_RE.match(close_time):
            raise ValidationError(f"Times for {day.value} must be HH:MM")

        cleaned.append({
            "day_of_week": day,
            "open_time": open_time,
            "close_time": close_time,
            "is_open": bool(entry.get("is_open", True)),
        })
    return cleaned


def save_working_hours(user: User | None, hours: list[dict], db: Session) -> dict:
    """Replace all working hours of the dealership in a single transaction."""
    require_admin(user)
    cleaned = _validate_working_hours(hours)

    dealership = db.get(DealershipInfo, DEALERSHIP_ID)
    if dealership is None:
        raise NotFoundError("Dealership info not found")

    try:
        db.query(WorkingHour).filter(
            WorkingHour.dealership_id == dealership.id
        ).delete(synchronize_session=False)
        for entry in cleaned:
            db.add(WorkingHour(dealership_id=dealership.id, **entry))
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.expire_all()
    logger.info("User %s replaced dealership working hours (%d days)", user.id, len(cleaned))
    return serialize_dealership(_load_dealership(db))


def get_users(user: User | None, db: Session) -> list[dict]:
    """All users, newest first. Admin only."""
    require_admin(user)
    users = db.query(User).order_by(User.created_at.desc(), User.id.asc()).all()
    return [serialize_user(u) for u in users]


def update_user_role(user: User | None, target_user_id: str, role: str | None, db: Session) -> dict:
    if not target_user_id:
        raise ValidationError("Missing user")
    if not role:
        raise ValidationError("Missing role")
    require_admin(user)

    try:
        new_role = UserRole(role)
    except ValueError:
        raise ValidationError(f"Invalid role: {role!r}")

    target = db.get(User, target_user_id)
    if target is None:
        raise NotFoundError("User not found")

    previous = target.role
    target.role = new_role
    db.commit()
    db.refresh(target)
    logger.info(
        "User %s changed role of %s: %s -> %s",
        user.id, target.id, getattr(previous, "value", previous), new_role.value,
    )
    return serialize_user(target)
