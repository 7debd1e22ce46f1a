"""Session tokens: HS256 JWTs carrying the user id in ``sub``."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from planmap.config import settings
from planmap.domain.errors import UnauthorizedError

logger = logging.getLogger(__name__)

ISSUER = "planmap"


def create_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    now = datetime.now(timezone.utc)
    expires_in = expires_in or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": user_id,
        "iss": ISSUER,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature, expiry and issuer; raise UnauthorizedError on any failure."""
    # JWTs have exactly three dot-separated parts
    if not token or token.count(".") != 2:
        raise UnauthorizedError("Invalid token format")
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=ISSUER,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Token rejected: {e}")
        raise UnauthorizedError("Invalid token")
    return payload
