"""
Authentication Router

Endpoints for inspecting the caller's identity.
"""
from fastapi import APIRouter, Depends

from src.caseflow.api.auth import User, get_current_user

router = APIRouter(prefix="/api/v1/auth", tags=["authentication"])


@router.get("/users/me")
async def read_users_me(current_user: User = Depends(get_current_user)):
    """
    Get current user information.

    Args:
        current_user: Current authenticated user

    Returns:
        Identity claims and whether the caller may use admin endpoints
    """
    return {
        "user_id": current_user.user_id,
        "email": current_user.email,
        "role": current_user.role,
        "is_admin": current_user.is_admin,
    }
