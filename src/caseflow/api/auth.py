"""
JWT Authentication for FastAPI

Verifies bearer tokens issued by the identity provider and gates admin-only
endpoints. Sign-in itself happens at the identity provider.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from config.settings import settings
from src.caseflow.utils.logger import get_logger

logger = get_logger(__name__)

ADMIN_ROLE = "admin"

# Bearer tokens are minted by the identity provider
bearer_scheme = HTTPBearer(auto_error=False)


class User(BaseModel):
    """Caller identity taken from token claims."""
    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        """Admin by role claim or by admin email allowlist."""
        if self.role == ADMIN_ROLE:
            return True
        return bool(self.email) and self.email.lower() in settings.admin_email_list


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Get current authenticated user from JWT token.

    Args:
        credentials: Bearer credentials from the Authorization header

    Returns:
        Current user

    Raises:
        HTTPException: 401 if the token is missing, invalid or has no subject
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = jwt.decode(credentials.credentials, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        logger.warning("token_rejected", error=str(e))
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    return User(user_id=user_id, email=payload.get("email"), role=payload.get("role"))


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """
    Capability check for administrator-only operations.

    Raises:
        HTTPException: 403 if the caller is not an administrator
    """
    if not current_user.is_admin:
        logger.warning("admin_access_denied", user_id=current_user.user_id)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator access required")
    return current_user
