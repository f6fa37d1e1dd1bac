from sqlalchemy import Column, Integer, String, DateTime, Date, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from electrical_pm.core.database import Base


class TimeEntryStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


DEFAULT_WORK_TYPE = "Regular"


class TimeEntry(Base):
    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    timesheet_id = Column(Integer, ForeignKey("timesheets.id"), nullable=True, index=True)
    sign_in_id = Column(Integer, ForeignKey("daily_sign_ins.id"), nullable=True)
    date = Column(Date, nullable=False, index=True)
    hours_worked = Column(Float, nullable=False)
    work_type = Column(String(50), default=DEFAULT_WORK_TYPE, nullable=False)
    description = Column(Text, nullable=True)
    task_performed = Column(Text, nullable=True)
    hourly_rate = Column(Float, nullable=True)
    total_cost = Column(Float, nullable=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
    status = Column(String(20), default=TimeEntryStatus.PENDING.value, nullable=False)
    rejection_reason = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    employee = relationship("Employee", back_populates="time_entries")
    project = relationship("Project", back_populates="time_entries")
    timesheet = relationship("Timesheet", back_populates="time_entries")
    sign_in = relationship("DailySignIn")
