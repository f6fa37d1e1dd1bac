import datetime as dt
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from electrical_pm.models.timesheet import TimesheetStatus
from electrical_pm.schemas.common import UserSummary, not_null
from electrical_pm.schemas.time_entry import TimeEntryBase, TimeEntryResponse


class TimesheetEntryInput(TimeEntryBase):
    """A time entry submitted as part of a timesheet; it takes the timesheet's date."""


class TimesheetCreate(BaseModel):
    date: dt.date
    title: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    entries: List[TimesheetEntryInput] = Field(default_factory=list)


class TimesheetUpdate(BaseModel):
    date: Optional[dt.date] = None
    title: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None
    entries: Optional[List[TimesheetEntryInput]] = None

    @field_validator("date")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)


class TimesheetListItem(BaseModel):
    id: int
    date: dt.date
    title: Optional[str] = None
    notes: Optional[str] = None
    status: TimesheetStatus
    created_by: int
    creator: Optional[UserSummary] = None
    submitted_by: Optional[int] = None
    submitted_at: Optional[dt.datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[dt.datetime] = None
    entry_count: int
    total_hours: float
    created_at: dt.datetime
    updated_at: dt.datetime

    class Config:
        from_attributes = True


class TimesheetResponse(TimesheetListItem):
    updated_by: Optional[int] = None
    time_entries: List[TimeEntryResponse] = []
