from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime
from electrical_pm.models.file import FileCategory
from electrical_pm.schemas.common import not_null


class FileUpdate(BaseModel):
    description: Optional[str] = None
    category: Optional[FileCategory] = None
    project_id: Optional[int] = None
    daily_log_id: Optional[int] = None
    tags: Optional[List[str]] = None

    @field_validator("category")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)

    class Config:
        use_enum_values = True


class FileRecordResponse(BaseModel):
    id: int
    original_filename: str
    mime_type: str
    file_size: int
    checksum: str
    category: str
    project_id: Optional[int] = None
    daily_log_id: Optional[int] = None
    uploaded_by: int
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    has_thumbnail: bool = False
    width: Optional[int] = None
    height: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FileStats(BaseModel):
    total_files: int
    total_size: int
    by_category: Dict[str, int]


class FileUploadFailure(BaseModel):
    filename: Optional[str] = None
    error: str


class FileUploadBatch(BaseModel):
    total: int
    uploaded: List[FileRecordResponse]
    failed: List[FileUploadFailure]
