"""Authentication middleware for FastAPI."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from recall.core.config import get_settings

logger = logging.getLogger(__name__)

# HTTP Bearer scheme for Authorization header
security = HTTPBearer(auto_error=False)

SYSTEM_USER_ID = "00000000-0000-0000-0000-000000000001"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class AuthContext:
    """Authenticated caller, passed explicitly to every service call."""

    user_id: str
    email: Optional[str]
    role: UserRole
    token: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def owner_scope(self) -> Optional[str]:
        """User id to filter owned rows by; None lets admins read any owner's rows."""
        return None if self.is_admin else self.user_id


def _load_role(user_id: str) -> UserRole:
    """Look up the user's role; anything unknown is a plain user."""
    from recall.db.supabase_client import get_supabase

    try:
        result = (
            get_supabase()
            .table("user_roles")
            .select("role")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
    except Exception as e:
        logger.warning(f"Error loading role for {user_id}: {e}")
        return UserRole.USER

    role = (result.data or {}).get("role") if result else None
    return UserRole.ADMIN if role == UserRole.ADMIN.value else UserRole.USER


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
) -> Optional[AuthContext]:
    """
    Extract and validate the current user from the request.

    Supports two authentication methods:
    1. Supabase JWT tokens (Bearer auth) - for dashboard users
    2. Admin API key (X-API-Key header) - for internal tools

    Returns None if no valid auth is present (for optional auth endpoints).
    """
    admin_key = get_settings().ADMIN_API_KEY
    if x_api_key and admin_key and x_api_key == admin_key:
        logger.debug("Authenticated via admin API key")
        return AuthContext(user_id=SYSTEM_USER_ID, email=None, role=UserRole.ADMIN, token="api-key")

    if not credentials:
        return None

    token = credentials.credentials

    try:
        from recall.db.supabase_client import get_supabase

        # Validates the JWT signature and expiration
        auth_response = get_supabase().auth.get_user(token)
        if not auth_response or not auth_response.user:
            return None

        user_id = str(auth_response.user.id)
        return AuthContext(
            user_id=user_id,
            email=auth_response.user.email,
            role=_load_role(user_id),
            token=token,
        )

    except Exception as e:
        logger.warning(f"Auth error: {e}")
        return None


async def require_auth(
    auth: Optional[AuthContext] = Depends(get_current_user),
) -> AuthContext:
    """Require authentication. Raises 401 if not authenticated."""
    if not auth:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth
