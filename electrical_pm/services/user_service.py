from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import ConflictError, NotFoundError, ValidationError
from electrical_pm.core.security import get_password_hash, validate_password_strength
from electrical_pm.models.audit_log import AuditAction
from electrical_pm.models.user import User
from electrical_pm.schemas.user import UserCreate, UserUpdate
from electrical_pm.services.audit_service import audit_service
import logging

logger = logging.getLogger(__name__)


class UserService:
    """User administration; every change is written to the audit log."""

    def get_user(self, db: Session, user_id: int) -> User:
        user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(
            func.lower(User.email) == email.lower(),
            User.deleted_at.is_(None)
        ).first()

    def _ensure_email_available(self, db: Session, email: str, exclude_id: Optional[int] = None):
        query = db.query(User).filter(func.lower(User.email) == email.lower())
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("User with this email already exists")

    def list_users(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        search: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None
    ) -> Tuple[List[User], int]:
        query = db.query(User).filter(User.deleted_at.is_(None))

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern)
            ))
        if role:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.is_active.is_(is_active))

        total = query.count()
        users = query.order_by(User.last_name.asc(), User.first_name.asc()).offset(offset).limit(limit).all()
        return users, total

    def create_user(self, db: Session, data: UserCreate, actor_id: Optional[int]) -> User:
        validate_password_strength(data.password)
        self._ensure_email_available(db, data.email)

        user = User(
            email=data.email.lower(),
            hashed_password=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            role=data.role,
            is_active=True
        )
        db.add(user)
        db.flush()
        audit_service.record(
            db, actor_id, AuditAction.CREATE, "user", user.id,
            {"email": user.email, "role": user.role}
        )
        db.commit()
        db.refresh(user)

        logger.info(f"User {user.id} ({user.email}) created by user {actor_id}")
        return user

    def update_user(self, db: Session, user_id: int, data: UserUpdate, actor_id: int) -> User:
        user = self.get_user(db, user_id)
        update_data = data.model_dump(exclude_unset=True)

        if user.id == actor_id:
            if "role" in update_data and update_data["role"] != user.role:
                raise ValidationError("You cannot change your own role")
            if update_data.get("is_active") is False:
                raise ValidationError("You cannot deactivate your own account")
        if update_data.get("email"):
            update_data["email"] = update_data["email"].lower()
            self._ensure_email_available(db, update_data["email"], exclude_id=user.id)

        changes = {
            field: {"from": getattr(user, field), "to": value}
            for field, value in update_data.items()
            if getattr(user, field) != value
        }
        for field, value in update_data.items():
            setattr(user, field, value)

        audit_service.record(db, actor_id, AuditAction.UPDATE, "user", user.id, changes)
        db.commit()
        db.refresh(user)
        return user

    def delete_user(self, db: Session, user_id: int, actor_id: int) -> None:
        if user_id == actor_id:
            raise ValidationError("You cannot delete your own account")
        user = self.get_user(db, user_id)

        user.deleted_at = datetime.utcnow()
        user.is_active = False
        audit_service.record(db, actor_id, AuditAction.DELETE, "user", user.id, {"email": user.email})
        db.commit()

        logger.info(f"User {user_id} deleted by user {actor_id}")

    def reset_password(self, db: Session, user_id: int, new_password: str, actor_id: int) -> User:
        user = self.get_user(db, user_id)
        validate_password_strength(new_password)

        user.hashed_password = get_password_hash(new_password)
        audit_service.record(db, actor_id, AuditAction.RESET_PASSWORD, "user", user.id)
        db.commit()
        db.refresh(user)
        return user


# Singleton instance
user_service = UserService()
