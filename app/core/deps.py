"""FastAPI dependencies for authentication and authorization."""

from typing import Optional
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User, UserRole, ADMIN_ROLES
from app.services.auth import decode_access_token

security = HTTPBearer(auto_error=False)


async def _user_from_token(db: AsyncSession, token: str) -> Optional[User]:
    payload = decode_access_token(token)
    if not payload:
        return None

    user_id: Optional[str] = payload.get("sub")
    if not user_id:
        return None

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        return None

    result = await db.execute(select(User).where(User.id == user_uuid))
    return result.scalar_one_or_none()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Extract and validate the current user from the bearer token.

    Raises 401 if the token is missing, invalid or names an unknown user,
    and 403 if the account is disabled.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await _user_from_token(db, credentials.credentials)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous requests get None instead of 401.

    Use this for endpoints that work with or without authentication.
    """
    if not credentials:
        return None

    user = await _user_from_token(db, credentials.credentials)
    if user and user.is_active:
        return user
    return None


def require_role(*roles: UserRole):
    """Dependency factory that checks the current user has one of ``roles``.

    Usage:
        @router.get("/admin-only")
        async def admin_route(user: User = Depends(require_admin)):
            ...
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access forbidden",
            )
        return current_user

    return role_checker


require_admin = require_role(*ADMIN_ROLES)
