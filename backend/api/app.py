import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.api.auth_routes import auth_router
from backend.api.car_routes import car_router
from backend.api.saved_routes import saved_router
from backend.api.settings_routes import settings_router
from backend.database.db import init_db
from backend.config.settings import get_settings
from backend.services.errors import ServiceError

logger = logging.getLogger(__name__)

settings = get_settings()

API_VERSION = "1.0.0"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=502,
        content={"success": False, "error": "Database temporarily unavailable"},
    )


def create_app() -> FastAPI:
    # Disable Swagger/ReDoc in production
    docs_kwargs = {}
    if settings.is_production:
        docs_kwargs = {"docs_url": None, "redoc_url": None}

    app = FastAPI(
        title="Autora API",
        description="Car dealership marketplace: listings, wishlists, test drives and admin settings",
        version=API_VERSION,
        **docs_kwargs,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(car_router, prefix="/api/v1")
    app.include_router(saved_router, prefix="/api/v1")
    app.include_router(settings_router, prefix="/api/v1")

    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "ok", "version": API_VERSION}

    @app.on_event("startup")
    def on_startup():
        settings.validate_production()
        if not settings.is_production:
            init_db()  # Production uses: alembic upgrade head

    return app


app = create_app()
