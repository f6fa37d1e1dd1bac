from sqlalchemy import Column, Integer, String, DateTime, Date, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from electrical_pm.core.database import Base


class TimesheetStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    APPROVED = "APPROVED"


class Timesheet(Base):
    __tablename__ = "timesheets"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, nullable=False, index=True)
    title = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), default=TimesheetStatus.DRAFT.value, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    submitted_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    submitted_at = Column(DateTime, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    creator = relationship("User", foreign_keys=[created_by])
    time_entries = relationship(
        "TimeEntry",
        back_populates="timesheet",
        cascade="all, delete-orphan",
        order_by="TimeEntry.id",
    )

    @property
    def is_locked(self) -> bool:
        return self.status == TimesheetStatus.APPROVED.value

    @property
    def entry_count(self) -> int:
        return len(self.time_entries)

    @property
    def total_hours(self) -> float:
        return round(sum(entry.hours_worked for entry in self.time_entries), 2)
