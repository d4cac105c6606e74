"""Identity token verification and local user sync.

Users sign in with the external identity provider, which issues signed JWTs.
We only verify those tokens; ``sub`` is the provider's user id and maps to
``User.external_id``.
"""

import logging

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.config.settings import get_settings
from backend.database.models import User
from backend.services.errors import ValidationError

logger = logging.getLogger(__name__)


def decode_identity_token(token: str) -> dict | None:
    """Decode an identity token. Returns the claims or None if invalid/expired."""
    settings = get_settings()
    options = {"require": ["sub", "exp"]}
    kwargs = {}
    if settings.identity_issuer:
        kwargs["issuer"] = settings.identity_issuer
    if settings.identity_audience:
        kwargs["audience"] = settings.identity_audience
    else:
        options["verify_aud"] = False

    try:
        return jwt.decode(
            token,
            settings.identity_jwt_secret,
            algorithms=[settings.identity_jwt_algorithm],
            options=options,
            **kwargs,
        )
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


def get_user_by_external_id(external_id: str, db: Session) -> User | None:
    return db.query(User).filter(User.external_id == external_id).first()


def sync_user(claims: dict, db: Session) -> User:
    """Create or refresh the local user for a verified identity."""
    external_id = claims.get("sub")
    email = claims.get("email")
    if not external_id:
        raise ValidationError("Identity token has no subject")

    user = get_user_by_external_id(external_id, db)
    is_new = user is None
    name = claims.get("name")
    image_url = claims.get("picture") or claims.get("image_url")

    if not is_new:
        if email:
            user.email = email
        if name:
            user.name = name
        if image_url:
            user.image_url = image_url
    else:
        if not email:
            raise ValidationError("Identity token has no email claim")
        user = User(external_id=external_id, email=email, name=name, image_url=image_url)
        db.add(user)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # A new user may lose a race with a concurrent sync of the same identity
        existing = get_user_by_external_id(external_id, db) if is_new else None
        if existing is None:
            logger.info("Sync for %s rejected: email already in use", external_id)
            raise ValidationError("Email already registered to another account")
        return existing

    db.refresh(user)
    logger.info("Synced user %s from identity provider", user.id)
    return user
