"""Wishlist (saved cars) operations."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.database.models import Car, User, UserSavedCar
from backend.services.errors import NotFoundError, UnauthorizedError
from backend.services.serialization import serialize_car

logger = logging.getLogger(__name__)


def toggle_saved_car(car_id: str, user: User | None, db: Session) -> dict:
    """Add the car to the user's wishlist, or remove it if already saved.

    Removal is a single DELETE statement, so of two racing toggles only one
    can observe the row. A duplicate insert from a racing add hits the
    (user_id, car_id) unique constraint and is reported as saved.
    """
    if user is None:
        raise UnauthorizedError("Unauthorized")

    car = db.get(Car, car_id)
    if not car:
        raise NotFoundError("Car not found")

    deleted = (
        db.query(UserSavedCar)
        .filter(UserSavedCar.user_id == user.id, UserSavedCar.car_id == car_id)
        .delete(synchronize_session=False)
    )
    if deleted:
        db.commit()
        logger.info("User %s removed car %s from wishlist", user.id, car_id)
        return {"success": True, "saved": False, "message": "Car removed from favorites"}

    db.add(UserSavedCar(user_id=user.id, car_id=car_id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Concurrent wishlist add for user %s car %s, already saved", user.id, car_id)
    else:
        logger.info("User %s added car %s to wishlist", user.id, car_id)
    return {"success": True, "saved": True, "message": "Car added to favorites"}


def get_saved_cars(user: User | None, db: Session) -> list[dict]:
    """The user's saved cars, most recently saved first."""
    if user is None:
        raise UnauthorizedError("Unauthorized")

    saved = (
        db.query(UserSavedCar)
        .join(UserSavedCar.car)
        .filter(UserSavedCar.user_id == user.id)
        .order_by(UserSavedCar.saved_at.desc(), UserSavedCar.id.asc())
        .all()
    )
    return [serialize_car(entry.car, wishlisted=True) for entry in saved]
