from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

_DEFAULT_IDENTITY_SECRET = "autora-dev-identity-secret-change-in-production"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./autora.db"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    cors_origins: list[str] = ["http://localhost:3000"]

    # Identity provider (tokens are issued externally, we only verify them)
    identity_jwt_secret: str = _DEFAULT_IDENTITY_SECRET
    identity_jwt_algorithm: str = "HS256"
    identity_issuer: str = ""
    identity_audience: str = ""

    # Listings
    default_page_limit: int = 6
    max_page_limit: int = 100
    featured_cars_limit: int = 3

    # Gemini image search
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_timeout_seconds: float = 30.0
    image_search_max_bytes: int = 5 * 1024 * 1024
    image_search_hourly_limit: int = 10

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    @field_validator(
        "default_page_limit", "max_page_limit", "featured_cars_limit", "image_search_hourly_limit"
    )
    @classmethod
    def check_positive_limit(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("page limits must be positive")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate_production(self) -> None:
        """Raise if production is using insecure defaults."""
        if self.is_production and self.identity_jwt_secret == _DEFAULT_IDENTITY_SECRET:
            raise ValueError("IDENTITY_JWT_SECRET must be changed from the default in production")
        if self.is_production and "sqlite" in self.database_url:
            raise ValueError("DATABASE_URL must point at a server database in production")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
