from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Dict, Optional
from datetime import date, datetime
from electrical_pm.models.employee import EmploymentStatus
from electrical_pm.schemas.common import not_null


class EmployeeBase(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    classification: str = Field(..., min_length=1, max_length=100)
    user_id: Optional[int] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    mobile_phone: Optional[str] = None
    hire_date: Optional[date] = None
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE
    employee_number: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    classification: Optional[str] = Field(None, min_length=1, max_length=100)
    user_id: Optional[int] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    mobile_phone: Optional[str] = None
    hire_date: Optional[date] = None
    employment_status: Optional[EmploymentStatus] = None
    employee_number: Optional[str] = Field(None, max_length=50)
    department: Optional[str] = None
    hourly_rate: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("first_name", "last_name", "classification", "employment_status", "is_active")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)

    class Config:
        use_enum_values = True


class EmployeeResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    classification: str
    user_id: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile_phone: Optional[str] = None
    hire_date: Optional[date] = None
    employment_status: str
    employee_number: Optional[str] = None
    department: Optional[str] = None
    hourly_rate: Optional[float] = None
    notes: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class EmployeeStats(BaseModel):
    total: int
    active: int
    inactive: int
    by_classification: Dict[str, int]
    by_employment_status: Dict[str, int]
