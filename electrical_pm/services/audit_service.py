from typing import Dict, Optional
from sqlalchemy.orm import Session
from electrical_pm.models.audit_log import AuditAction, AuditLog
import logging

audit_logger = logging.getLogger("electrical_pm.audit")


class AuditService:

    def record(
        self,
        db: Session,
        actor_id: Optional[int],
        action: AuditAction,
        resource_type: str,
        resource_id: Optional[int] = None,
        details: Optional[Dict] = None,
        ip_address: Optional[str] = None
    ) -> AuditLog:
        """Stage an audit row in the caller's transaction and mirror it to the audit logger."""
        entry = AuditLog(
            user_id=actor_id,
            action=action.value,
            resource_type=resource_type,
            resource_id=str(resource_id) if resource_id is not None else None,
            details=details,
            ip_address=ip_address
        )
        db.add(entry)

        audit_logger.info(
            f"{action.value} {resource_type} {resource_id} by user {actor_id}"
            + (f" {details}" if details else "")
        )
        return entry


# Singleton instance
audit_service = AuditService()
