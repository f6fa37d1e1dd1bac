from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Float, Text, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from electrical_pm.core.database import Base


class EmploymentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    ON_LEAVE = "ON_LEAVE"
    TERMINATED = "TERMINATED"
    SEASONAL = "SEASONAL"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, index=True)
    classification = Column(String(100), nullable=False)  # e.g. Journeyman, Apprentice
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    mobile_phone = Column(String(50), nullable=True)
    hire_date = Column(Date, nullable=True)
    employment_status = Column(String(20), default=EmploymentStatus.ACTIVE.value, nullable=False)
    employee_number = Column(String(50), unique=True, nullable=True)
    department = Column(String(100), nullable=True)
    hourly_rate = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", back_populates="employee", foreign_keys=[user_id])
    sign_ins = relationship("DailySignIn", back_populates="employee")
    time_entries = relationship("TimeEntry", back_populates="employee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
