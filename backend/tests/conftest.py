"""Shared test configuration."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import jwt
import pytest

# Ensure the project root is in the path so imports work
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from backend.config.settings import get_settings  # noqa: E402


@pytest.fixture
def make_token():
    """Mint identity tokens the way the identity provider would."""
    def _make(external_id: str, email: str | None = None, expires_in: int = 3600, **claims) -> str:
        settings = get_settings()
        payload = {
            "sub": external_id,
            "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
            **claims,
        }
        if email:
            payload["email"] = email
        return jwt.encode(payload, settings.identity_jwt_secret, algorithm=settings.identity_jwt_algorithm)

    return _make
