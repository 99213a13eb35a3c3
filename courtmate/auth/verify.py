"""
Supabase access token verification.

Tokens are ES256 JWTs signed with the project's keys, published as a JWKS
document; PyJWKClient fetches and caches them. The ``sub`` claim is the
player's user id, which every scheduling route needs.
"""

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWKClient

from courtmate.config import settings
from courtmate.infrastructure.observability.logging import bind_request_context, get_logger

logger = get_logger(__name__)

SUPABASE_AUDIENCE = "authenticated"

_jwk_client = PyJWKClient(settings.jwks_url(), cache_keys=True)
_security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def verify_jwt(token: str) -> dict:
    """Decode and validate a Supabase access token; 401 on any failure."""
    try:
        signing_key = _jwk_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=["ES256"],
            audience=SUPABASE_AUDIENCE,
            options={"verify_exp": True, "require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        logger.warning("Rejected access token", error=str(e))
        raise _unauthorized(f"Invalid authentication token: {e}") from e


def auth_dependency(credentials: HTTPAuthorizationCredentials = Depends(_security)) -> dict:
    return verify_jwt(credentials.credentials)


async def current_user_id(request: Request, claims: dict = Depends(auth_dependency)) -> str:
    """
    The authenticated player's id, bound to the log context and request.state.

    Must stay async: sync dependencies run in a worker thread and their
    contextvar bindings never reach the handler.
    """
    user_id = claims.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token")
    bind_request_context(user_id=user_id)
    request.state.user_id = user_id
    return user_id
