from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from datetime import date, datetime
from electrical_pm.models.project import BillingType, ProjectStatus, ProjectType
from electrical_pm.schemas.common import ClientSummary, UserSummary, not_null


class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    project_number: Optional[str] = Field(None, max_length=50)
    client_id: int
    status: ProjectStatus = ProjectStatus.QUOTED
    type: ProjectType = ProjectType.COMMERCIAL
    billing_type: BillingType = BillingType.TIME_AND_MATERIALS
    location: Optional[str] = None
    address: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_end_date: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None

    class Config:
        use_enum_values = True


class ProjectCreate(ProjectBase):
    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date must be after start date")
        return self


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    project_number: Optional[str] = Field(None, max_length=50)
    client_id: Optional[int] = None
    status: Optional[ProjectStatus] = None
    type: Optional[ProjectType] = None
    billing_type: Optional[BillingType] = None
    location: Optional[str] = None
    address: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_end_date: Optional[date] = None
    budget: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None

    @field_validator("name", "client_id", "status", "type", "billing_type")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)

    class Config:
        use_enum_values = True


class ProjectResponse(BaseModel):
    id: int
    name: str
    project_number: Optional[str] = None
    client_id: int
    client: Optional[ClientSummary] = None
    status: str
    type: str
    billing_type: str
    location: Optional[str] = None
    address: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    estimated_end_date: Optional[date] = None
    budget: Optional[float] = None
    actual_cost: Optional[float] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProjectMemberCreate(BaseModel):
    user_id: int
    role: Optional[str] = Field(None, max_length=50)


class ProjectMemberResponse(BaseModel):
    id: int
    project_id: int
    user_id: int
    role: Optional[str] = None
    assigned_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True
