"""FastAPI dependencies for authentication and authorization.

Usage:
    @router.get("/notifications")
    def list_mine(actor: Actor = Depends(get_current_actor)):
        ...

    @router.post("/documents")
    def upload(actor: Actor = Depends(require_role(UserRole.ADMIN))):
        ...
"""

from typing import Annotated, Callable
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .actor import Actor
from ..observability.context import bind_log_context
from .jwt import decode_token
from .roles import UserRole


# HTTP Bearer token security scheme
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_actor(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> Actor:
    """Validate the bearer token and return the acting identity.

    Role and ID come from the verified token only; request bodies never
    supply them.

    Raises:
        HTTPException 401: If the token is missing, invalid, expired or
            carries an unknown role
    """
    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Invalid token: missing user ID claim")

    try:
        user_id = UUID(user_id_str)
        role = UserRole(payload.get("role"))
    except ValueError as e:
        raise _unauthorized(f"Invalid token claims: {str(e)}")

    bind_log_context(actor_id=user_id, actor_role=role.value)
    return Actor(id=user_id, role=role, email=payload.get("email"))


def require_role(*allowed_roles: UserRole) -> Callable:
    """Create a dependency that admits only the given roles.

    Example:
        @router.delete("/{document_id}")
        def delete(actor: Actor = Depends(require_role(UserRole.ADMIN))):
            ...

    Raises:
        HTTPException 403: If the actor's role is not listed
    """

    def role_dependency(actor: Actor = Depends(get_current_actor)) -> Actor:
        if actor.role not in allowed_roles:
            required = ", ".join(role.value for role in allowed_roles)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required}",
            )
        return actor

    return role_dependency


# Type alias for dependency injection
CurrentActor = Annotated[Actor, Depends(get_current_actor)]
