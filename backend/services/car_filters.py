"""Filter facets for the car search UI, computed over AVAILABLE listings."""

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.database.models import Car, CarStatus
from backend.services.serialization import decimal_to_float

logger = logging.getLogger(__name__)

DEFAULT_MIN_PRICE = 0
DEFAULT_MAX_PRICE = 100000


def _distinct_values(column, db: Session) -> list[str]:
    rows = (
        db.query(column)
        .filter(Car.status == CarStatus.AVAILABLE)
        .distinct()
        .all()
    )
    # Sorted here so ordering is ordinal regardless of the database collation
    return sorted(value for (value,) in rows if value is not None)


def get_car_filters(db: Session) -> dict:
    """Distinct brands, body types, fuel types, transmissions and the price range."""
    min_price, max_price = (
        db.query(func.min(Car.price), func.max(Car.price))
        .filter(Car.status == CarStatus.AVAILABLE)
        .one()
    )

    return {
        "brands": _distinct_values(Car.brand, db),
        "bodyTypes": _distinct_values(Car.body_type, db),
        "fuelTypes": _distinct_values(Car.fuel_type, db),
        "transmissions": _distinct_values(Car.transmission, db),
        "priceRange": {
            "min": decimal_to_float(min_price) if min_price is not None else DEFAULT_MIN_PRICE,
            "max": decimal_to_float(max_price) if max_price is not None else DEFAULT_MAX_PRICE,
        },
    }
