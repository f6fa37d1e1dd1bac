from sqlalchemy import Column, Integer, String, DateTime, Date, Text, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from datetime import datetime
from electrical_pm.core.database import Base


class DailySignIn(Base):
    __tablename__ = "daily_sign_ins"
    __table_args__ = (
        # At most one open session per employee and day
        Index(
            "uq_daily_sign_ins_active",
            "employee_id",
            "date",
            unique=True,
            sqlite_where=text("sign_out_time IS NULL"),
            postgresql_where=text("sign_out_time IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    sign_in_time = Column(DateTime, nullable=False)
    sign_out_time = Column(DateTime, nullable=True)
    location = Column(String(255), nullable=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True)
    notes = Column(Text, nullable=True)
    signed_in_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    signed_out_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    employee = relationship("Employee", back_populates="sign_ins")
    project = relationship("Project")

    @property
    def is_active(self) -> bool:
        return self.sign_out_time is None

    @property
    def hours(self):
        if self.sign_out_time is None:
            return None
        return round((self.sign_out_time - self.sign_in_time).total_seconds() / 3600, 2)
