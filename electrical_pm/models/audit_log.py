from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from datetime import datetime
import enum
from electrical_pm.core.database import Base


class AuditAction(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    RESET_PASSWORD = "RESET_PASSWORD"
    CHANGE_PASSWORD = "CHANGE_PASSWORD"
    LOGIN = "LOGIN"


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)  # actor

    # Action Details
    action = Column(String(30), nullable=False)
    resource_type = Column(String(100), nullable=False)  # 'user', 'timesheet', ...
    resource_id = Column(String(100), nullable=True)
    details = Column(JSON, nullable=True)

    ip_address = Column(String(45), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
