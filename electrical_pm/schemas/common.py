from pydantic import BaseModel
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


def not_null(value):
    """Reject an explicit null for a field that may be omitted but not cleared."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T
    message: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: List[T]
    pagination: Pagination
    message: Optional[str] = None


class MessageResponse(BaseModel):
    success: bool = True
    data: Optional[dict] = None
    message: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class EmployeeSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    classification: str
    employee_number: Optional[str] = None

    class Config:
        from_attributes = True


class ProjectSummary(BaseModel):
    id: int
    name: str
    project_number: Optional[str] = None

    class Config:
        from_attributes = True


class ClientSummary(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
