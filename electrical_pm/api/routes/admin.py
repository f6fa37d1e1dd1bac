from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from electrical_pm.api.deps import get_super_admin
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Role
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.user import ResetPasswordRequest, UserCreate, UserResponse, UserUpdate
from electrical_pm.services.user_service import user_service

# Only super admins can reach these routes
router = APIRouter(prefix="/admin/users", tags=["Admin"])


@router.post("", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_super_admin)
):
    """Create a user account."""
    return ok(user_service.create_user(db, data, current_user.id), "User created successfully")


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: PageParams = Depends(),
    search: Optional[str] = None,
    role: Optional[Role] = None,
    is_active: Optional[bool] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_super_admin)
):
    """List users with search and filters."""
    users, total = user_service.list_users(
        db, page.offset, page.limit,
        search=search,
        role=role.value if role else None,
        is_active=is_active
    )
    return paginated(users, total, page)


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_super_admin)
):
    """Get user by ID."""
    return ok(user_service.get_user(db, user_id))


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_super_admin)
):
    """Update user."""
    return ok(user_service.update_user(db, user_id, data, current_user.id), "User updated successfully")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_super_admin)
):
    """Deactivate and soft-delete a user."""
    user_service.delete_user(db, user_id, current_user.id)
    return ok(None, "User deleted successfully")


@router.post("/{user_id}/reset-password", response_model=MessageResponse)
async def reset_password(
    user_id: int,
    data: ResetPasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_super_admin)
):
    """Set a new password for a user."""
    user_service.reset_password(db, user_id, data.new_password, current_user.id)
    return ok(None, "Password reset successfully")
