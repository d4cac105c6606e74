import enum
import uuid
from datetime import datetime, date
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# Well-known primary key of the one dealership configuration row
DEALERSHIP_ID = "default"


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class CarStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    SOLD = "SOLD"


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class BookingStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class DayOfWeek(str, enum.Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class User(Base):
    """Local account mirrored from the identity provider."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    external_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(200))
    image_url: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(String(50))
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), default=UserRole.USER, nullable=False)

    # Image search usage (reset each hour)
    image_search_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    image_search_window: Mapped[datetime | None] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class Car(Base):
    """A vehicle listing for sale."""
    __tablename__ = "cars"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    mileage: Mapped[str | None] = mapped_column(String(50))
    color: Mapped[str | None] = mapped_column(String(50))
    fuel_type: Mapped[str] = mapped_column(String(50), nullable=False)
    transmission: Mapped[str] = mapped_column(String(50), nullable=False)
    body_type: Mapped[str] = mapped_column(String(50), nullable=False)
    seats: Mapped[int | None] = mapped_column(Integer)
    description: Mapped[str | None] = mapped_column(Text)
    status: Mapped[CarStatus] = mapped_column(
        Enum(CarStatus), default=CarStatus.AVAILABLE, nullable=False
    )
    featured: Mapped[bool] = mapped_column(Boolean, default=False)
    images: Mapped[list] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_cars_price_non_negative"),
        Index("ix_cars_status_created", "status", "created_at"),
        Index("ix_cars_status_price", "status", "price"),
    )


class UserSavedCar(Base):
    """Wishlist entry: one row per (user, car)."""
    __tablename__ = "user_saved_cars"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    car_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cars.id", ondelete="CASCADE"), index=True, nullable=False
    )
    saved_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    car: Mapped[Car] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "car_id", name="uq_user_saved_car"),
    )


class TestDriveBooking(Base):
    __tablename__ = "test_drive_bookings"
    __test__ = False  # not a pytest class

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    car_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cars.id", ondelete="CASCADE"), index=True, nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )
    booking_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False
    )
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        Index("ix_test_drive_car_user", "car_id", "user_id"),
    )


class DealershipInfo(Base):
    """Dealership contact details. Exactly one row, keyed by DEALERSHIP_ID."""
    __tablename__ = "dealership_info"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=DEALERSHIP_ID)
    name: Mapped[str] = mapped_column(String(200), default="Autora Motors")
    address: Mapped[str] = mapped_column(String(300), default="69 Car Street, Autoville, CA 69420")
    phone: Mapped[str] = mapped_column(String(50), default="+1 (555) 123-4567")
    email: Mapped[str] = mapped_column(String(255), default="contact@autora.com")
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    working_hours: Mapped[list["WorkingHour"]] = relationship(
        back_populates="dealership", cascade="all, delete-orphan"
    )


class WorkingHour(Base):
    __tablename__ = "working_hours"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    dealership_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("dealership_info.id", ondelete="CASCADE"), index=True, nullable=False
    )
    day_of_week: Mapped[DayOfWeek] = mapped_column(Enum(DayOfWeek), nullable=False)
    open_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    close_time: Mapped[str] = mapped_column(String(5), nullable=False)
    is_open: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    dealership: Mapped[DealershipInfo] = relationship(back_populates="working_hours")

    __table_args__ = (
        UniqueConstraint("dealership_id", "day_of_week", name="uq_working_hour_day"),
    )
