import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from electrical_pm.models.time_entry import DEFAULT_WORK_TYPE
from electrical_pm.schemas.common import EmployeeSummary, ProjectSummary, not_null


class TimeEntryBase(BaseModel):
    employee_id: int
    project_id: int
    hours_worked: float
    work_type: str = Field(DEFAULT_WORK_TYPE, max_length=50)
    description: Optional[str] = None
    task_performed: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None


class TimeEntryCreate(TimeEntryBase):
    date: dt.date
    timesheet_id: Optional[int] = None
    sign_in_id: Optional[int] = None


class TimeEntryBulkCreate(BaseModel):
    entries: List[TimeEntryCreate] = Field(..., min_length=1)


class TimeEntryUpdate(BaseModel):
    project_id: Optional[int] = None
    date: Optional[dt.date] = None
    hours_worked: Optional[float] = None
    work_type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None
    task_performed: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None

    @field_validator("project_id", "date", "hours_worked", "work_type")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)


class TimeEntryFromSignIn(BaseModel):
    sign_in_id: int
    project_id: int


class TimeEntryReject(BaseModel):
    reason: str = Field(..., min_length=1)


class TimeEntryResponse(BaseModel):
    id: int
    employee_id: int
    employee: Optional[EmployeeSummary] = None
    project_id: int
    project: Optional[ProjectSummary] = None
    timesheet_id: Optional[int] = None
    sign_in_id: Optional[int] = None
    date: dt.date
    hours_worked: float
    work_type: str
    description: Optional[str] = None
    task_performed: Optional[str] = None
    hourly_rate: Optional[float] = None
    total_cost: Optional[float] = None
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    status: str
    rejection_reason: Optional[str] = None
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    approved_by: Optional[int] = None
    approved_at: Optional[dt.datetime] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class DayTotal(BaseModel):
    employee_id: int
    date: dt.date
    total_hours: float
