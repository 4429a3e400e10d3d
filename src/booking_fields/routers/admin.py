"""Admin router for issuing access tokens"""

from typing import List

from authlib.jose.errors import InvalidTokenError
from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from booking_fields.auth.jwt_utils import JWTUtils, get_jwt_utils
from booking_fields.auth.models import EDIT_CALENDARS, MANAGE_BOOKINGS, MANAGE_OPTIONS
from booking_fields.config import config

router = APIRouter(prefix="/admin", tags=["Admin"])

KNOWN_PERMISSIONS = {MANAGE_OPTIONS, EDIT_CALENDARS, MANAGE_BOOKINGS}


class TokenRequest(BaseModel):
    user_id: str = Field(..., description="User ID to create token for", examples=["admin-1"])
    permissions: List[str] = Field(
        default_factory=lambda: sorted(KNOWN_PERMISSIONS),
        description="Permissions granted to the token",
    )


class TokenResponse(BaseModel):
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: str = Field(..., description="User ID encoded in token")
    permissions: List[str]


@router.post(
    "/generate-token",
    summary="Generate JWT Token",
    response_model=TokenResponse,
    description="Issue an admin token for integrations and testing",
)
async def generate_token(
    request: TokenRequest,
    x_admin_key: str = Header(..., description="Admin API key for authentication"),
    jwt: JWTUtils = Depends(get_jwt_utils),
):
    """
    Generate a JWT token carrying the requested permissions.

    Requires the admin API key in the X-Admin-Key header.
    """
    expected_key = config.get("admin_api_key")
    if not expected_key or x_admin_key != expected_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid admin API key"
        )

    unknown = set(request.permissions) - KNOWN_PERMISSIONS
    if unknown:
        raise HTTPException(
            status_code=400, detail=f"Unknown permissions: {', '.join(sorted(unknown))}"
        )

    try:
        access_token = jwt.create_access_token(request.user_id, request.permissions)
    except InvalidTokenError as e:
        raise HTTPException(status_code=500, detail=f"Failed to generate token: {str(e)}")

    return TokenResponse(
        access_token=access_token,
        user_id=request.user_id,
        permissions=request.permissions,
    )
