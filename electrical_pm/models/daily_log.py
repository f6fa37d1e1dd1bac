from sqlalchemy import Column, Integer, String, DateTime, Date, Text, Boolean, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from electrical_pm.core.database import Base


class DailyLog(Base):
    __tablename__ = "daily_logs"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    weather = Column(String(100), nullable=True)
    crew_members = Column(JSON, default=list)  # List of names or employee ids on site
    hours_worked = Column(JSON, default=dict)  # {crew member: hours}
    work_performed = Column(Text, nullable=False)
    materials_used = Column(JSON, default=list)
    equipment_used = Column(Text, nullable=True)
    issues = Column(Text, nullable=True)
    inspector_visit = Column(Boolean, default=False, nullable=False)
    inspector_notes = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    project = relationship("Project", back_populates="daily_logs")
    files = relationship("File", back_populates="daily_log")
