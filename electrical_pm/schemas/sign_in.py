import datetime as dt
from pydantic import BaseModel, Field
from typing import List, Optional
from electrical_pm.schemas.common import EmployeeSummary, ProjectSummary


class SignInCreate(BaseModel):
    employee_id: int
    date: Optional[dt.date] = None
    sign_in_time: Optional[dt.datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    project_id: Optional[int] = None
    notes: Optional[str] = None


class BulkSignInCreate(BaseModel):
    employee_ids: List[int] = Field(..., min_length=1)
    date: Optional[dt.date] = None
    sign_in_time: Optional[dt.datetime] = None
    location: Optional[str] = Field(None, max_length=255)
    project_id: Optional[int] = None


class SignOutRequest(BaseModel):
    sign_out_time: Optional[dt.datetime] = None
    notes: Optional[str] = None


class SignInResponse(BaseModel):
    id: int
    employee_id: int
    employee: Optional[EmployeeSummary] = None
    date: dt.date
    sign_in_time: dt.datetime
    sign_out_time: Optional[dt.datetime] = None
    location: Optional[str] = None
    project_id: Optional[int] = None
    project: Optional[ProjectSummary] = None
    notes: Optional[str] = None
    signed_in_by: Optional[int] = None
    signed_out_by: Optional[int] = None
    is_active: bool
    hours: Optional[float] = None
    created_at: dt.datetime

    class Config:
        from_attributes = True


class BulkSignInResult(BaseModel):
    signed_in: List[SignInResponse]
    already_signed_in: List[int]


class SignInStatus(BaseModel):
    employee_id: int
    date: dt.date
    is_signed_in: bool
