from fastapi import APIRouter, Cookie, Depends, Response
from sqlalchemy.orm import Session
from typing import Optional
from electrical_pm.api.deps import get_current_user
from electrical_pm.core.config import settings
from electrical_pm.core.database import get_db
from electrical_pm.core.exceptions import AuthenticationError
from electrical_pm.core.responses import ok
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse
from electrical_pm.schemas.user import (
    ChangePasswordRequest, LoginRequest, LoginResponse, RefreshRequest, Token, UserResponse
)
from electrical_pm.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])

REFRESH_COOKIE = "refresh_token"


@router.post("/login", response_model=ApiResponse[LoginResponse])
async def login(
    credentials: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """Log in with email and password."""
    result = auth_service.login(db, credentials.email, credentials.password)
    response.set_cookie(
        REFRESH_COOKIE,
        result["refresh_token"],
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600,
        httponly=True,
        samesite="strict"
    )
    return ok(result, "Login successful")


@router.post("/refresh", response_model=ApiResponse[Token])
async def refresh_token(
    data: Optional[RefreshRequest] = None,
    refresh_cookie: Optional[str] = Cookie(None, alias=REFRESH_COOKIE),
    db: Session = Depends(get_db)
):
    """Exchange a refresh token (body or cookie) for a new access token."""
    token = (data.refresh_token if data else None) or refresh_cookie
    if not token:
        raise AuthenticationError("Refresh token required")
    return ok(auth_service.refresh(db, token))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: User = Depends(get_current_user)
):
    """Log out (clears the refresh token cookie)."""
    response.delete_cookie(REFRESH_COOKIE)
    return ok(None, "Logged out successfully")


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(current_user: User = Depends(get_current_user)):
    """Get the authenticated user."""
    return ok(current_user)


@router.put("/password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Change the authenticated user's password."""
    auth_service.change_password(db, current_user, data.current_password, data.new_password)
    return ok(None, "Password changed successfully")
