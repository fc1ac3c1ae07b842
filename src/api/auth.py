"""Session token verification.

Tokens are issued by the authentication flows as HS256 JWTs and travel in
the session cookie or an ``Authorization: Bearer`` header.
"""

import jwt

from src.commons.settings.models import AuthSettings
from src.commons.telemetry import get_logger
from src.domain.exceptions import AuthenticationException

logger = get_logger(__name__)

BEARER_PREFIX = "bearer "


def extract_token(cookie: str | None, authorization: str | None) -> str | None:
    """Pick the session token, preferring the cookie."""
    if cookie:
        return cookie
    if authorization and authorization.lower().startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX) :].strip() or None
    return None


def decode_user_id(token: str, auth_settings: AuthSettings) -> str:
    """Verify a session token and return the user id it carries.

    The id is read from the ``id`` claim, falling back to ``sub``.

    Raises:
        AuthenticationException: If the token is invalid, expired or has
            no user id.
    """
    try:
        payload = jwt.decode(
            token,
            auth_settings.jwt_secret,
            algorithms=[auth_settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationException("Session expired") from None
    except jwt.InvalidTokenError as e:
        logger.debug("Rejected session token", extra={"reason": str(e)})
        raise AuthenticationException("Invalid session token") from None

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise AuthenticationException("Session token has no user id")
    return str(user_id)
