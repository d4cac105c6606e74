"""Convert ORM rows into JSON-safe dicts.

Prices are stored as fixed-point decimals and leave the service as plain
floats; timestamps leave as canonical UTC strings (``2024-05-01T09:30:00.000Z``).
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

from backend.database.models import Car, DealershipInfo, DayOfWeek, TestDriveBooking, User, WorkingHour

_DAY_ORDER = {day: index for index, day in enumerate(DayOfWeek)}


def decimal_to_float(value) -> float:
    """Parse a fixed-point value through its decimal string form.

    None becomes 0.0. Malformed or non-finite input raises ValueError instead
    of being coerced.
    """
    if value is None:
        return 0.0
    try:
        parsed = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Malformed decimal value: {value!r}")
    if not parsed.is_finite():
        raise ValueError(f"Non-finite decimal value: {value!r}")
    return float(parsed)


def to_iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def date_to_iso(value: date | None) -> str | None:
    if value is None:
        return None
    return to_iso(datetime(value.year, value.month, value.day))


def _enum_value(value):
    return getattr(value, "value", value)


def serialize_car(car: Car, wishlisted: bool = False) -> dict:
    return {
        "id": car.id,
        "brand": car.brand,
        "model": car.model,
        "year": car.year,
        "price": decimal_to_float(car.price),
        "mileage": car.mileage,
        "color": car.color,
        "fuelType": car.fuel_type,
        "transmission": car.transmission,
        "bodyType": car.body_type,
        "seats": car.seats,
        "description": car.description,
        "status": _enum_value(car.status),
        "featured": bool(car.featured),
        "images": list(car.images or []),
        "createdAt": to_iso(car.created_at),
        "updatedAt": to_iso(car.updated_at),
        "wishlisted": wishlisted,
    }


def sort_working_hours(hours: list[WorkingHour]) -> list[WorkingHour]:
    """Order rows MONDAY..SUNDAY regardless of how the store sorts enum names."""
    return sorted(hours, key=lambda h: _DAY_ORDER[DayOfWeek(_enum_value(h.day_of_week))])


def serialize_working_hour(hour: WorkingHour) -> dict:
    return {
        "id": hour.id,
        "dealershipId": hour.dealership_id,
        "dayOfWeek": _enum_value(hour.day_of_week),
        "openTime": hour.open_time,
        "closeTime": hour.close_time,
        "isOpen": bool(hour.is_open),
        "createdAt": to_iso(hour.created_at),
        "updatedAt": to_iso(hour.updated_at),
    }


def serialize_dealership(dealership: DealershipInfo) -> dict:
    return {
        "id": dealership.id,
        "name": dealership.name,
        "address": dealership.address,
        "phone": dealership.phone,
        "email": dealership.email,
        "latitude": dealership.latitude,
        "longitude": dealership.longitude,
        "createdAt": to_iso(dealership.created_at),
        "updatedAt": to_iso(dealership.updated_at),
        "workingHours": [
            serialize_working_hour(h) for h in sort_working_hours(dealership.working_hours)
        ],
    }


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "imageUrl": user.image_url,
        "phone": user.phone,
        "role": _enum_value(user.role),
        "createdAt": to_iso(user.created_at),
        "updatedAt": to_iso(user.updated_at),
    }


def serialize_test_drive(booking: TestDriveBooking) -> dict:
    return {
        "id": booking.id,
        "status": _enum_value(booking.status),
        "bookingDate": date_to_iso(booking.booking_date),
    }
