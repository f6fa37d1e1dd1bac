import logging
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from electrical_pm.core.database import get_db
from electrical_pm.core.exceptions import AuthenticationError, PermissionDeniedError
from electrical_pm.core.permissions import Action, Resource, Role, has_permission
from electrical_pm.core.security import decode_token
from electrical_pm.models.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer access token to an active user."""
    if credentials is None:
        raise AuthenticationError("Authentication required")

    payload = decode_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid or expired token")

    user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")
    return user


def authorize(resource: Resource, action: Action):
    """Dependency factory checking the caller's role against the permission table."""
    def permission_checker(current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(current_user.role, resource, action):
            logger.warning(
                f"User {current_user.id} ({current_user.role}) denied {action.value} on {resource.value}"
            )
            raise PermissionDeniedError(
                f"You do not have permission to {action.value} {resource.value.replace('_', ' ')}"
            )
        return current_user
    return permission_checker


def require_roles(*roles: Role):
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in {role.value for role in roles}:
            raise PermissionDeniedError("You do not have the required permissions")
        return current_user
    return role_checker


get_super_admin = require_roles(Role.SUPER_ADMIN)
