#!/usr/bin/env python3
"""
Create the tables and the first super admin account.

Credentials come from SUPERADMIN_EMAIL / SUPERADMIN_PASSWORD (and optionally
SUPERADMIN_FIRST_NAME / SUPERADMIN_LAST_NAME).
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from electrical_pm.core.database import engine, Base
from electrical_pm.core.permissions import Role
from electrical_pm.core.security import get_password_hash, validate_password_strength
from electrical_pm.models.user import User
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_superadmin():
    """Create the super admin unless one already exists."""
    email = os.getenv("SUPERADMIN_EMAIL")
    password = os.getenv("SUPERADMIN_PASSWORD")
    if not email or not password:
        logger.error("SUPERADMIN_EMAIL and SUPERADMIN_PASSWORD must be set")
        sys.exit(1)
    validate_password_strength(password)

    Base.metadata.create_all(bind=engine)

    with Session(engine) as db:
        existing = db.query(User).filter(User.role == Role.SUPER_ADMIN.value).first()
        if existing:
            logger.info(f"Super admin already exists: {existing.email}")
            return

        superadmin = User(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            first_name=os.getenv("SUPERADMIN_FIRST_NAME", "System"),
            last_name=os.getenv("SUPERADMIN_LAST_NAME", "Administrator"),
            role=Role.SUPER_ADMIN.value,
            is_active=True
        )
        try:
            db.add(superadmin)
            db.commit()
        except Exception:
            db.rollback()
            raise

        logger.info(f"Super admin created: {superadmin.email}")


if __name__ == "__main__":
    create_superadmin()
