"""JWT access token issuing and validation.

Tokens are issued by the identity provider in front of this service; the
service only verifies them. create_access_token exists for tooling and tests.

Claims:
- sub: User ID as UUID string
- role: "ADMIN" | "MANAGER" | "STANDARDIZATION"
- email: User's email address
- iat / exp: Issued-at and expiry as Unix timestamps

Signed with HS256 using the JWT_SECRET setting. Validation is stateless; no
database lookup is needed to authenticate a request.

Example Token Payload:
{
  "sub": "550e8400-e29b-41d4-a716-446655440000",
  "role": "MANAGER",
  "email": "manager@example.com",
  "iat": 1704368400,
  "exp": 1704372000
}
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt

from ..config import get_settings
from .roles import UserRole


def create_access_token(
    user_id: UUID,
    role: UserRole,
    email: Optional[str] = None,
    expires_in: Optional[timedelta] = None,
) -> str:
    """Create a signed access token.

    Args:
        user_id: User's UUID
        role: User's role
        email: User's email address
        expires_in: Token lifetime (default JWT_EXPIRY_MINUTES)

    Returns:
        str: Signed JWT token
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(minutes=settings.JWT_EXPIRY_MINUTES)

    payload = {
        'sub': str(user_id),
        'role': UserRole(role).value,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int((now + expires_in).timestamp()),
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Returns:
        dict: Decoded token payload

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
