"""Access token helpers (HS256 JWT)."""
from datetime import timedelta
from typing import Any, Dict, Optional
import logging

import jwt

from dealership.core.config import settings
from dealership.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def create_access_token(claims: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """
    Sign an access token.

    Args:
        claims: Payload; `sub` and `role` are what the API reads back
        expires_minutes: Lifetime, defaults to ACCESS_TOKEN_EXPIRE_MINUTES
    """
    lifetime = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    payload = dict(claims)
    payload["exp"] = utcnow() + timedelta(minutes=lifetime)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token payload, or None if it is invalid or expired."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None
