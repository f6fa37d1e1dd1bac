from datetime import datetime
from typing import Dict
from sqlalchemy.orm import Session
from electrical_pm.core.config import settings
from electrical_pm.core.exceptions import AuthenticationError, ValidationError
from electrical_pm.core.security import (
    REFRESH_TOKEN, create_access_token, create_refresh_token, decode_token,
    get_password_hash, validate_password_strength, verify_password
)
from electrical_pm.models.audit_log import AuditAction
from electrical_pm.models.user import User
from electrical_pm.services.audit_service import audit_service
from electrical_pm.services.user_service import user_service
import logging

logger = logging.getLogger(__name__)


class AuthService:

    def _token_pair(self, user: User) -> Dict:
        return {
            "access_token": create_access_token(user.id, user.role),
            "refresh_token": create_refresh_token(user.id, user.role),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    def login(self, db: Session, email: str, password: str) -> Dict:
        user = user_service.get_by_email(db, email)
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {email}")
            raise AuthenticationError("Invalid email or password")

        user.last_login = datetime.utcnow()
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} logged in")
        return {**self._token_pair(user), "user": user}

    def refresh(self, db: Session, refresh_token: str) -> Dict:
        payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN)
        user = db.query(User).filter(
            User.id == int(payload["sub"]),
            User.deleted_at.is_(None)
        ).first()
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return {
            "access_token": create_access_token(user.id, user.role),
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        }

    def change_password(self, db: Session, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.hashed_password):
            raise AuthenticationError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must be different from the current password")
        validate_password_strength(new_password)

        user.hashed_password = get_password_hash(new_password)
        audit_service.record(db, user.id, AuditAction.CHANGE_PASSWORD, "user", user.id)
        db.commit()

        logger.info(f"User {user.id} changed their password")


# Singleton instance
auth_service = AuthService()
