"""Single car view with wishlist state, the caller's test drive and dealership hours."""

from sqlalchemy.orm import Session, selectinload

from backend.database.models import (
    DEALERSHIP_ID,
    BookingStatus,
    Car,
    DealershipInfo,
    TestDriveBooking,
    User,
    UserSavedCar,
)
from backend.services.errors import NotFoundError
from backend.services.serialization import serialize_car, serialize_dealership, serialize_test_drive

# Bookings still worth showing on the car page
VISIBLE_BOOKING_STATUSES = (
    BookingStatus.PENDING,
    BookingStatus.CONFIRMED,
    BookingStatus.COMPLETED,
)


def _is_wishlisted(car_id: str, user: User | None, db: Session) -> bool:
    if user is None:
        return False
    return db.query(UserSavedCar.id).filter(
        UserSavedCar.user_id == user.id,
        UserSavedCar.car_id == car_id,
    ).first() is not None


def _latest_test_drive(car_id: str, user: User | None, db: Session) -> TestDriveBooking | None:
    if user is None:
        return None
    return (
        db.query(TestDriveBooking)
        .filter(
            TestDriveBooking.car_id == car_id,
            TestDriveBooking.user_id == user.id,
            TestDriveBooking.status.in_(VISIBLE_BOOKING_STATUSES),
        )
        .order_by(TestDriveBooking.created_at.desc(), TestDriveBooking.id.desc())
        .first()
    )


def get_car_details(car_id: str, user: User | None, db: Session) -> dict:
    """Assemble the car detail view. Raises NotFoundError for unknown ids.

    The dealership is read only; a missing row yields ``None`` here.
    """
    car = db.get(Car, car_id)
    if not car:
        raise NotFoundError("Car not found")

    booking = _latest_test_drive(car_id, user, db)
    dealership = (
        db.query(DealershipInfo)
        .options(selectinload(DealershipInfo.working_hours))
        .filter(DealershipInfo.id == DEALERSHIP_ID)
        .first()
    )

    return {
        **serialize_car(car, _is_wishlisted(car_id, user, db)),
        "testDriveInfo": {
            "userTestDrive": serialize_test_drive(booking) if booking else None,
            "dealership": serialize_dealership(dealership) if dealership else None,
        },
    }
