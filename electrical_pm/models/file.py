from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
import enum
from electrical_pm.core.database import Base


class FileCategory(str, enum.Enum):
    PHOTO = "PHOTO"
    DOCUMENT = "DOCUMENT"
    DRAWING = "DRAWING"
    PERMIT = "PERMIT"
    INVOICE = "INVOICE"
    OTHER = "OTHER"


class File(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, index=True)
    storage_path = Column(String(500), nullable=False)
    original_filename = Column(String(255), nullable=False)
    mime_type = Column(String(100), nullable=False)
    file_size = Column(Integer, nullable=False)
    checksum = Column(String(64), nullable=False, index=True)  # sha256 hex digest
    category = Column(String(20), default=FileCategory.OTHER.value, nullable=False)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=True, index=True)
    daily_log_id = Column(Integer, ForeignKey("daily_logs.id"), nullable=True)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    description = Column(Text, nullable=True)
    tags = Column(JSON, default=list)
    thumbnail_path = Column(String(500), nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    deleted_at = Column(DateTime, nullable=True)

    # Relationships
    project = relationship("Project")
    daily_log = relationship("DailyLog", back_populates="files")

    @property
    def has_thumbnail(self) -> bool:
        return self.thumbnail_path is not None

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")
