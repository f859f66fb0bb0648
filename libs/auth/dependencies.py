import uuid
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from libs.auth.models import AuthUser
from libs.common.config import get_settings
from libs.common.logging import get_logger

settings = get_settings()
security = HTTPBearer(auto_error=False)
logger = get_logger(__name__)


def _extract_token(
    request: Request, credentials: Optional[HTTPAuthorizationCredentials]
) -> Optional[str]:
    """Bearer header wins; browsers fall back to the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.AUTH_COOKIE_NAME)


def decode_access_token(token: str) -> AuthUser:
    """Verify a Supabase access token and map its claims onto AuthUser."""
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=["HS256"],
        options={"verify_aud": False},
    )
    user = AuthUser(**payload)
    # Profiles are keyed by the auth uid, so it has to be a UUID.
    uuid.UUID(user.user_id)
    return user


async def get_current_user(
    request: Request,
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(security)
    ] = None,
) -> AuthUser:
    """
    Validate the Supabase JWT and return the authenticated user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _extract_token(request, credentials)
    if not token:
        raise credentials_exception

    try:
        user = decode_access_token(token)
    except (JWTError, ValidationError, ValueError) as exc:
        logger.info("Rejected access token: %s", exc)
        raise credentials_exception

    request.state.user = user
    return user
