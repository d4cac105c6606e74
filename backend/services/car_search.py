"""
Paginated car search.

Builds one predicate from the optional filters, counts with it, then fetches
the requested page with the same predicate so totals and pages never diverge.
"""

import logging
import math

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from backend.config.settings import get_settings
from backend.database.models import Car, CarStatus, User, UserSavedCar
from backend.services.errors import ValidationError
from backend.services.serialization import serialize_car

logger = logging.getLogger(__name__)

SORT_NEWEST = "newest"
SORT_PRICE_ASC = "priceAsc"
SORT_PRICE_DESC = "priceDesc"
SORT_OPTIONS = (SORT_NEWEST, SORT_PRICE_ASC, SORT_PRICE_DESC)


def build_search_query(
    db: Session,
    search: str | None = None,
    brand: str | None = None,
    body_type: str | None = None,
    fuel_type: str | None = None,
    transmission: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
) -> Query:
    """Return an unordered, unpaginated query of AVAILABLE cars matching the filters."""
    query = db.query(Car).filter(Car.status == CarStatus.AVAILABLE)

    search = (search or "").strip()
    if search:
        query = query.filter(
            or_(
                Car.brand.icontains(search, autoescape=True),
                Car.model.icontains(search, autoescape=True),
                Car.description.icontains(search, autoescape=True),
            )
        )

    for column, value in (
        (Car.brand, brand),
        (Car.body_type, body_type),
        (Car.fuel_type, fuel_type),
        (Car.transmission, transmission),
    ):
        if value:
            query = query.filter(func.lower(column) == value.lower())

    query = query.filter(Car.price >= (min_price or 0))
    if max_price is not None:
        query = query.filter(Car.price <= max_price)

    return query


def _order_by(sort_by: str | None):
    # id breaks ties so consecutive pages never overlap or skip rows
    if sort_by == SORT_PRICE_ASC:
        return (Car.price.asc(), Car.id.asc())
    if sort_by == SORT_PRICE_DESC:
        return (Car.price.desc(), Car.id.asc())
    return (Car.created_at.desc(), Car.id.asc())


def saved_car_ids(user: User | None, db: Session) -> set[str]:
    """All car ids on the user's wishlist, fetched in a single query."""
    if user is None:
        return set()
    rows = db.query(UserSavedCar.car_id).filter(UserSavedCar.user_id == user.id).all()
    return {car_id for (car_id,) in rows}


def search_cars(
    db: Session,
    user: User | None = None,
    search: str | None = None,
    brand: str | None = None,
    body_type: str | None = None,
    fuel_type: str | None = None,
    transmission: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    sort_by: str | None = SORT_NEWEST,
    page: int | None = 1,
    limit: int | None = None,
) -> dict:
    """
    Search AVAILABLE cars and return one page plus pagination metadata.

    A non-positive limit raises ValidationError; limits above
    ``max_page_limit`` are clamped. Pages below 1 are read as page 1, and a
    page past the end yields an empty list with the true totals.
    """
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_limit
    if limit <= 0:
        raise ValidationError("limit must be a positive integer")
    limit = min(limit, settings.max_page_limit)
    if page is None or page < 1:
        page = 1

    query = build_search_query(
        db,
        search=search,
        brand=brand,
        body_type=body_type,
        fuel_type=fuel_type,
        transmission=transmission,
        min_price=min_price,
        max_price=max_price,
    )

    total = query.order_by(None).count()
    cars = (
        query.order_by(*_order_by(sort_by))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    wishlisted = saved_car_ids(user, db)
    logger.debug("Car search matched %d cars (page %d, limit %d)", total, page, limit)

    return {
        "success": True,
        "data": [serialize_car(car, car.id in wishlisted) for car in cars],
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit),
        },
    }


def get_featured_cars(db: Session, limit: int | None = None) -> list[dict]:
    """Featured AVAILABLE cars for the homepage, newest first."""
    if limit is None:
        limit = get_settings().featured_cars_limit
    if limit <= 0:
        raise ValidationError("limit must be a positive integer")
    cars = (
        db.query(Car)
        .filter(Car.featured == True, Car.status == CarStatus.AVAILABLE)
        .order_by(Car.created_at.desc(), Car.id.asc())
        .limit(limit)
        .all()
    )
    return [serialize_car(car) for car in cars]
