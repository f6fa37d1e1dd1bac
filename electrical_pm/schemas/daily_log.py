import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional
from electrical_pm.schemas.common import ProjectSummary, not_null


class DailyLogBase(BaseModel):
    weather: Optional[str] = Field(None, max_length=100)
    crew_members: List[Any] = Field(default_factory=list)
    hours_worked: Dict[str, float] = Field(default_factory=dict)
    work_performed: str = Field(..., min_length=1)
    materials_used: List[Any] = Field(default_factory=list)
    equipment_used: Optional[str] = None
    issues: Optional[str] = None
    inspector_visit: bool = False
    inspector_notes: Optional[str] = None


class DailyLogCreate(DailyLogBase):
    project_id: int
    date: dt.date


class DailyLogUpdate(BaseModel):
    date: Optional[dt.date] = None
    weather: Optional[str] = Field(None, max_length=100)
    crew_members: Optional[List[Any]] = None
    hours_worked: Optional[Dict[str, float]] = None
    work_performed: Optional[str] = Field(None, min_length=1)
    materials_used: Optional[List[Any]] = None
    equipment_used: Optional[str] = None
    issues: Optional[str] = None
    inspector_visit: Optional[bool] = None
    inspector_notes: Optional[str] = None

    @field_validator("date", "work_performed", "inspector_visit")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)


class DailyLogResponse(DailyLogBase):
    id: int
    project_id: int
    project: Optional[ProjectSummary] = None
    date: dt.date
    created_by: Optional[int] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class DailyLogStats(BaseModel):
    total_logs: int
    this_month_logs: int
    this_week_logs: int
    recent_logs: List[DailyLogResponse]
