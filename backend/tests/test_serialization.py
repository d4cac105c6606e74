"""Tests for decimal/timestamp normalization and car serialization."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from backend.database.models import Car, CarStatus, DayOfWeek, WorkingHour
from backend.services.serialization import (
    date_to_iso,
    decimal_to_float,
    serialize_car,
    sort_working_hours,
    to_iso,
)


class TestDecimalToFloat:
    def test_decimal(self):
        assert decimal_to_float(Decimal("24500.50")) == 24500.5

    def test_string(self):
        assert decimal_to_float("199.99") == 199.99

    def test_none_defaults_to_zero(self):
        assert decimal_to_float(None) == 0.0

    def test_malformed_rejected(self):
        with pytest.raises(ValueError, match="Malformed"):
            decimal_to_float("12,000")

    def test_non_finite_rejected(self):
        with pytest.raises(ValueError, match="Non-finite"):
            decimal_to_float(Decimal("NaN"))
        with pytest.raises(ValueError):
            decimal_to_float("Infinity")


class TestTimestamps:
    def test_naive_taken_as_utc(self):
        assert to_iso(datetime(2024, 5, 1, 9, 30)) == "2024-05-01T09:30:00.000Z"

    def test_aware_converted_to_utc(self):
        tz = timezone(timedelta(hours=2))
        assert to_iso(datetime(2024, 5, 1, 11, 30, 0, 250000, tzinfo=tz)) == "2024-05-01T09:30:00.250Z"

    def test_none(self):
        assert to_iso(None) is None

    def test_date(self):
        assert date_to_iso(date(2024, 6, 3)) == "2024-06-03T00:00:00.000Z"


class TestSerializeCar:
    def _car(self):
        return Car(
            id="car-1",
            brand="Toyota",
            model="Camry",
            year=2022,
            price=Decimal("20000.00"),
            fuel_type="Petrol",
            transmission="Automatic",
            body_type="Sedan",
            status=CarStatus.AVAILABLE,
            featured=False,
            images=["a.jpg", "b.jpg"],
            created_at=datetime(2024, 1, 2, 3, 4, 5),
            updated_at=datetime(2024, 1, 3, 3, 4, 5),
        )

    def test_fields(self):
        data = serialize_car(self._car(), wishlisted=True)
        assert data["price"] == 20000.0
        assert isinstance(data["price"], float)
        assert data["bodyType"] == "Sedan"
        assert data["fuelType"] == "Petrol"
        assert data["status"] == "AVAILABLE"
        assert data["images"] == ["a.jpg", "b.jpg"]
        assert data["createdAt"] == "2024-01-02T03:04:05.000Z"
        assert data["wishlisted"] is True

    def test_wishlisted_defaults_false(self):
        assert serialize_car(self._car())["wishlisted"] is False


def test_working_hours_sorted_by_weekday():
    hours = [
        WorkingHour(day_of_week=DayOfWeek.SUNDAY, open_time="10:00", close_time="16:00"),
        WorkingHour(day_of_week=DayOfWeek.FRIDAY, open_time="09:00", close_time="18:00"),
        WorkingHour(day_of_week=DayOfWeek.MONDAY, open_time="09:00", close_time="18:00"),
    ]
    ordered = [h.day_of_week for h in sort_working_hours(hours)]
    assert ordered == [DayOfWeek.MONDAY, DayOfWeek.FRIDAY, DayOfWeek.SUNDAY]
