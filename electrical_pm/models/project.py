from sqlalchemy import Column, Integer, String, Float, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from electrical_pm.core.database import Base


class ProjectStatus(str, enum.Enum):
    QUOTED = "QUOTED"
    AWARDED = "AWARDED"
    IN_PROGRESS = "IN_PROGRESS"
    INSPECTION = "INSPECTION"
    COMPLETE = "COMPLETE"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"


class ProjectType(str, enum.Enum):
    COMMERCIAL = "COMMERCIAL"
    RESIDENTIAL = "RESIDENTIAL"
    INDUSTRIAL = "INDUSTRIAL"
    SERVICE = "SERVICE"
    OTHER = "OTHER"


class BillingType(str, enum.Enum):
    TIME_AND_MATERIALS = "TIME_AND_MATERIALS"
    LUMP_SUM = "LUMP_SUM"
    SERVICE_CALL = "SERVICE_CALL"


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    project_number = Column(String(50), nullable=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    status = Column(String(20), default=ProjectStatus.QUOTED.value, nullable=False)
    type = Column(String(20), default=ProjectType.COMMERCIAL.value, nullable=False)
    billing_type = Column(String(30), default=BillingType.TIME_AND_MATERIALS.value, nullable=False)
    location = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    estimated_end_date = Column(Date, nullable=True)
    budget = Column(Float, nullable=True)
    actual_cost = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    client = relationship("Client", back_populates="projects")
    members = relationship("ProjectMember", back_populates="project", cascade="all, delete-orphan")
    daily_logs = relationship("DailyLog", back_populates="project")
    time_entries = relationship("TimeEntry", back_populates="project")


class ProjectMember(Base):
    __tablename__ = "project_members"
    __table_args__ = (UniqueConstraint("project_id", "user_id", name="uq_project_member"),)

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(50), nullable=True)  # role on this project, e.g. "Foreman"
    assigned_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    project = relationship("Project", back_populates="members")
    user = relationship("User", back_populates="project_memberships")
