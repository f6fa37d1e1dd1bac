from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime
from electrical_pm.models.client import ClientType
from electrical_pm.schemas.project import ProjectResponse
from electrical_pm.schemas.common import not_null


class ClientBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    type: ClientType = ClientType.OTHER
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    tax_id: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        use_enum_values = True


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[ClientType] = None
    address: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    tax_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", "type")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)

    class Config:
        use_enum_values = True


class ClientResponse(BaseModel):
    id: int
    name: str
    type: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    tax_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ContactBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    is_primary: bool = False


class ContactCreate(ContactBase):
    pass


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    title: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    is_primary: Optional[bool] = None

    @field_validator("name", "is_primary")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)


class ContactResponse(BaseModel):
    id: int
    client_id: int
    name: str
    title: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_primary: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ClientProjectStatistics(BaseModel):
    total: int
    by_status: Dict[str, int]
    total_budget: float


class ClientProjectsResponse(BaseModel):
    client: ClientResponse
    projects: List[ProjectResponse]
    statistics: ClientProjectStatistics
