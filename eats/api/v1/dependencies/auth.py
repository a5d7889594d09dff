# eats/api/v1/dependencies/auth.py
import logging
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from eats.api.v1.roles import can_activate, OPERATION_ROLES
from eats.core.security import decode_access_token
from eats.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_user_from_token(token: Optional[str]) -> Optional[User]:
    """
    Resolve a token to its user.

    Args:
        token: Encoded JWT, possibly missing

    Returns:
        User, or None if the token is missing, invalid or orphaned
    """
    if not token:
        return None

    payload = decode_access_token(token)
    if not payload or "id" not in payload:
        return None

    return await User.get_or_none(id=payload["id"])


async def get_optional_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[User]:
    """
    Get current user if authenticated, None otherwise.

    Args:
        credentials: Bearer credentials from the Authorization header

    Returns:
        Current user or None
    """
    if not credentials:
        return None

    return await get_user_from_token(credentials.credentials)


def guard(operation: str) -> Callable:
    """
    Build the dependency that gates one operation.

    The returned dependency yields the current user (None on public
    operations) or fails with 403 when the role table denies access.

    Args:
        operation: Key in OPERATION_ROLES

    Returns:
        FastAPI dependency
    """
    roles = OPERATION_ROLES.get(operation)

    async def check_access(
            user: Optional[User] = Depends(get_optional_current_user)
    ) -> Optional[User]:
        if not can_activate(roles, user):
            logger.info(f"Access to {operation} denied")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden resource"
            )
        return user

    return check_access
