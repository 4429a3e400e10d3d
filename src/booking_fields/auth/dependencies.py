"""Authentication dependencies for FastAPI"""

from typing import Optional

from authlib.jose.errors import InvalidTokenError
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from booking_fields.auth.jwt_utils import JWTUtils, get_jwt_utils
from booking_fields.auth.models import User
from booking_fields.logging_config import get_logger

security = HTTPBearer(auto_error=False)

logger = get_logger(__name__)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    jwt: JWTUtils = Depends(get_jwt_utils),
) -> User:
    """
    Extract the user from a Bearer token.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authorization token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return jwt.extract_user(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_permission(permission: str):
    """
    Dependency factory: the current user must hold ``permission``.

    Raises:
        HTTPException: 403 if the permission is missing
    """

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.can(permission):
            logger.warning(f"User {user.user_id} lacks permission {permission}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission: {permission}",
            )
        return user

    return dependency
