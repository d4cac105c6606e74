"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from backend.config.settings import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.default_page_limit == 6
        assert settings.featured_cars_limit == 3
        assert settings.is_production is False

    def test_non_positive_page_limit_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_page_limit=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_page_limit=-1)

    def test_production_requires_real_identity_secret(self):
        settings = Settings(_env_file=None, environment="production", database_url="postgresql://db/autora")
        with pytest.raises(ValueError, match="IDENTITY_JWT_SECRET"):
            settings.validate_production()

    def test_production_rejects_sqlite(self):
        settings = Settings(
            _env_file=None,
            environment="production",
            identity_jwt_secret="real-secret",
        )
        with pytest.raises(ValueError, match="DATABASE_URL"):
            settings.validate_production()

    def test_production_ok(self):
        settings = Settings(
            _env_file=None,
            environment="production",
            identity_jwt_secret="real-secret",
            database_url="postgresql://db/autora",
        )
        settings.validate_production()
