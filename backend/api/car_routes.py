"""Car browsing endpoints: facets, search, featured, details, wishlist toggle, image search."""

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from backend.config.settings import get_settings
from backend.database.db import get_db
from backend.database.models import User
from backend.api.auth import get_current_user_optional, get_current_user_required
from backend.services.car_detail_service import get_car_details
from backend.services.car_filters import get_car_filters
from backend.services.car_search import SORT_NEWEST, get_featured_cars, search_cars
from backend.services.image_search_service import (
    consume_image_search_quota,
    process_image_search,
    validate_image,
)
from backend.services.wishlist_service import toggle_saved_car

car_router = APIRouter(prefix="/cars", tags=["cars"])


@car_router.get("/filters")
def car_filters(db: Session = Depends(get_db)):
    """Distinct filter values and price range over available cars."""
    return {"success": True, "data": get_car_filters(db)}


@car_router.get("/featured")
def featured_cars(
    limit: int | None = Query(None),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": get_featured_cars(db, limit=limit)}


@car_router.get("")
def list_cars(
    search: str | None = Query(None, max_length=200),
    brand: str | None = Query(None, max_length=100),
    body_type: str | None = Query(None, alias="bodyType", max_length=50),
    fuel_type: str | None = Query(None, alias="fuelType", max_length=50),
    transmission: str | None = Query(None, max_length=50),
    min_price: float | None = Query(None, alias="minPrice"),
    max_price: float | None = Query(None, alias="maxPrice"),
    sort_by: str = Query(SORT_NEWEST, alias="sortBy"),
    page: int = Query(1),
    limit: int | None = Query(None),
    current_user: User | None = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """Search available cars with optional filters, sorting and pagination."""
    return search_cars(
        db,
        user=current_user,
        search=search,
        brand=brand,
        body_type=body_type,
        fuel_type=fuel_type,
        transmission=transmission,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )


@car_router.post("/image-search")
async def image_search(
    image: UploadFile = File(...),
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Guess car attributes (brand, body type, color...) from an uploaded photo."""
    # One byte past the limit is enough to reject oversized uploads
    contents = await image.read(get_settings().image_search_max_bytes + 1)
    validate_image(contents, image.content_type)
    consume_image_search_quota(current_user, db)
    result = await process_image_search(contents, image.content_type)
    return {"success": True, "data": result}


@car_router.get("/{car_id}")
def car_details(
    car_id: str,
    current_user: User | None = Depends(get_current_user_optional),
    db: Session = Depends(get_db),
):
    """Car details with wishlist state, the caller's test drive and dealership hours."""
    return {"success": True, "data": get_car_details(car_id, current_user, db)}


@car_router.post("/{car_id}/save")
def toggle_save(
    car_id: str,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db),
):
    """Add the car to the wishlist, or remove it if already saved."""
    return toggle_saved_car(car_id, current_user, db)
