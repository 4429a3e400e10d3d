"""JWT utilities for admin authentication using authlib"""

import time
from typing import Dict, List, Optional

from authlib.jose import JoseError, JsonWebToken
from authlib.jose.errors import InvalidTokenError

from booking_fields.auth.models import User
from booking_fields.config import config
from booking_fields.logging_config import get_logger

logger = get_logger(__name__)

TOKEN_ISSUER = "booking-user-fields"


class JWTUtils:
    """Issues and verifies HS256 tokens signed with the configured secret"""

    def __init__(self, app_config: dict):
        self.jwt = JsonWebToken(["HS256"])
        self.secret_key = app_config.get("jwt_secret_key")

    def _require_secret(self) -> str:
        if not self.secret_key:
            raise InvalidTokenError("JWT_SECRET_KEY must be configured")
        return self.secret_key

    def create_access_token(
        self,
        user_id: str,
        permissions: Optional[List[str]] = None,
        expires_in: int = 3600,
    ) -> str:
        now = int(time.time())
        payload = {
            "iss": TOKEN_ISSUER,
            "sub": str(user_id),
            "iat": now,
            "exp": now + expires_in,
            "permissions": list(permissions or []),
        }
        token = self.jwt.encode({"alg": "HS256"}, payload, self._require_secret())
        return token.decode("utf-8")

    def _verify_token(self, token: str) -> Dict:
        """
        Verify signature, expiry and issuer.

        Raises:
            InvalidTokenError: If the token is invalid or expired
        """
        try:
            claims = self.jwt.decode(token, self._require_secret())
            claims.validate()
        except JoseError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise InvalidTokenError(f"Token validation failed: {str(e)}")

        if claims.get("iss") != TOKEN_ISSUER:
            raise InvalidTokenError(f"Invalid issuer: {claims.get('iss')}")
        return claims

    def extract_user(self, token: str) -> User:
        """
        Raises:
            InvalidTokenError: If token is invalid or missing user ID
        """
        claims = self._verify_token(token)
        user_id = claims.get("sub")
        if not user_id:
            raise InvalidTokenError("Token missing 'sub' claim")

        return User(
            user_id=user_id,
            claims={
                "iss": claims.get("iss"),
                "exp": claims.get("exp"),
                "iat": claims.get("iat"),
                "permissions": claims.get("permissions", []),
            },
        )


jwt_utils = JWTUtils(config)


def get_jwt_utils() -> JWTUtils:
    return jwt_utils
