from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import date, datetime
from electrical_pm.models.quote import QuoteStatus
from electrical_pm.schemas.common import ClientSummary, not_null


class LineItem(BaseModel):
    description: str = ""
    quantity: float = Field(..., allow_inf_nan=False)
    unit: str = ""
    unit_price: float = Field(..., allow_inf_nan=False)
    total: float = Field(..., allow_inf_nan=False)


class QuoteCreate(BaseModel):
    client_id: int
    project_name: str = Field(..., min_length=1, max_length=255)
    project_address: Optional[str] = None
    status: QuoteStatus = QuoteStatus.DRAFT
    line_items: List[LineItem]
    tax: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    terms: Optional[str] = None

    class Config:
        use_enum_values = True


class QuoteUpdate(BaseModel):
    client_id: Optional[int] = None
    project_name: Optional[str] = Field(None, min_length=1, max_length=255)
    project_address: Optional[str] = None
    status: Optional[QuoteStatus] = None
    line_items: Optional[List[LineItem]] = None
    tax: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    terms: Optional[str] = None

    @field_validator("client_id", "project_name", "status", "line_items")
    @classmethod
    def required_when_given(cls, v):
        return not_null(v)

    class Config:
        use_enum_values = True


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus

    class Config:
        use_enum_values = True


class QuoteDuplicate(BaseModel):
    new_project_name: Optional[str] = Field(None, min_length=1, max_length=255)


class QuoteResponse(BaseModel):
    id: int
    quote_number: str
    client_id: int
    client: Optional[ClientSummary] = None
    project_name: str
    project_address: Optional[str] = None
    status: str
    line_items: List[LineItem]
    subtotal: float
    tax: float
    total: float
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuoteStats(BaseModel):
    total: int
    by_status: Dict[str, int]
    total_value: float
    accepted_value: float
