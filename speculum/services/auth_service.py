import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from speculum.config import settings

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "auth_token"
ADMIN_ROLE = "admin"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_admin_credentials(username: str, password: str) -> bool:
    """
    Check username and password against the configured admin account.

    An empty ADMIN_PASSWORD_HASH disables admin login entirely.
    """
    if not settings.ADMIN_PASSWORD_HASH:
        logger.warning("Admin login attempted but ADMIN_PASSWORD_HASH is not set")
        return False

    if username != settings.ADMIN_USERNAME:
        return False

    try:
        return bcrypt.checkpw(password.encode(), settings.ADMIN_PASSWORD_HASH.encode())
    except ValueError as e:
        logger.error(f"Error verifying admin password: {e}")
        return False


def create_access_token(username: str, role: str = ADMIN_ROLE) -> str:
    """Create a signed JWT for an authenticated admin."""
    expire = datetime.now(timezone.utc) + timedelta(
        hours=settings.ACCESS_TOKEN_EXPIRE_HOURS
    )
    payload = {"sub": username, "role": role, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_access_token(token: str) -> Optional[str]:
    """Verify a JWT and return the username if it belongs to an admin."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
    except jwt.InvalidTokenError:
        return None

    username: Optional[str] = payload.get("sub")
    if username is None or payload.get("role") != ADMIN_ROLE:
        return None
    return username
