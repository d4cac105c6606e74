"""
Seed the database with sample car listings and the dealership record.

Run: python -m backend.seed_data
"""

import logging
from decimal import Decimal

from backend.database.db import init_db, SessionLocal
from backend.database.models import Car, CarStatus, DEALERSHIP_ID, DealershipInfo, WorkingHour
from backend.services.settings_service import DEFAULT_WORKING_HOURS

logger = logging.getLogger(__name__)

SAMPLE_CARS = [
    {"brand": "Toyota", "model": "Camry", "year": 2022, "price": "24500.00", "mileage": "18,000 km",
     "color": "White", "fuel_type": "Petrol", "transmission": "Automatic", "body_type": "Sedan",
     "seats": 5, "featured": True, "description": "One owner, full service history."},
    {"brand": "Honda", "model": "CR-V", "year": 2021, "price": "27900.00", "mileage": "32,500 km",
     "color": "Grey", "fuel_type": "Hybrid", "transmission": "Automatic", "body_type": "SUV",
     "seats": 5, "featured": True, "description": "Hybrid SUV with adaptive cruise control."},
    {"brand": "Ford", "model": "Mustang", "year": 2019, "price": "31000.00", "mileage": "41,000 km",
     "color": "Red", "fuel_type": "Petrol", "transmission": "Manual", "body_type": "Coupe",
     "seats": 4, "featured": False, "description": "V8 GT, manual gearbox."},
    {"brand": "Tesla", "model": "Model 3", "year": 2023, "price": "38990.00", "mileage": "9,000 km",
     "color": "Blue", "fuel_type": "Electric", "transmission": "Automatic", "body_type": "Sedan",
     "seats": 5, "featured": True, "description": "Long range, autopilot included."},
    {"brand": "Volkswagen", "model": "Golf", "year": 2018, "price": "14200.00", "mileage": "67,000 km",
     "color": "Black", "fuel_type": "Diesel", "transmission": "Manual", "body_type": "Hatchback",
     "seats": 5, "featured": False, "description": "Economical diesel hatchback."},
    {"brand": "BMW", "model": "X5", "year": 2020, "price": "45500.00", "mileage": "38,000 km",
     "color": "Silver", "fuel_type": "Diesel", "transmission": "Automatic", "body_type": "SUV",
     "seats": 7, "featured": False, "status": CarStatus.SOLD, "description": "Sold, kept for history."},
]


def seed_cars(db):
    if db.query(Car).count():
        return 0
    for data in SAMPLE_CARS:
        car = Car(**{**data, "price": Decimal(data["price"]), "images": []})
        db.add(car)
    db.commit()
    return len(SAMPLE_CARS)


def seed_dealership(db):
    if db.get(DealershipInfo, DEALERSHIP_ID):
        return False
    db.add(DealershipInfo(
        id=DEALERSHIP_ID,
        latitude=37.7749,
        longitude=-122.4194,
        working_hours=[WorkingHour(**hours) for hours in DEFAULT_WORKING_HOURS],
    ))
    db.commit()
    return True


def main():
    logging.basicConfig(level=logging.INFO)
    init_db()
    db = SessionLocal()
    try:
        cars = seed_cars(db)
        created = seed_dealership(db)
        logger.info("Seeded %d cars, dealership created: %s", cars, created)
    finally:
        db.close()


if __name__ == "__main__":
    main()
