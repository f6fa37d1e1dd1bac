from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.employee import EmploymentStatus
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeStats, EmployeeUpdate
from electrical_pm.services.employee_service import employee_service

router = APIRouter(prefix="/employees", tags=["Employees"])


@router.get("/stats", response_model=ApiResponse[EmployeeStats])
async def get_employee_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.READ))
):
    """Headcount by status and classification."""
    return ok(employee_service.get_stats(db))


@router.get("/classifications", response_model=ApiResponse[List[str]])
async def get_classifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.READ))
):
    """Distinct job classifications in use."""
    return ok(employee_service.get_classifications(db))


@router.get("", response_model=PaginatedResponse[EmployeeResponse])
async def list_employees(
    page: PageParams = Depends(),
    search: Optional[str] = None,
    classification: Optional[str] = None,
    employment_status: Optional[EmploymentStatus] = None,
    department: Optional[str] = None,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.READ))
):
    """List employees sorted by last name."""
    employees, total = employee_service.list_employees(
        db, page.offset, page.limit,
        search=search,
        classification=classification,
        employment_status=employment_status.value if employment_status else None,
        department=department,
        include_inactive=include_inactive
    )
    return paginated(employees, total, page)


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeResponse])
async def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.READ))
):
    """Get employee by ID."""
    return ok(employee_service.get_employee(db, employee_id))


@router.post("", response_model=ApiResponse[EmployeeResponse], status_code=status.HTTP_201_CREATED)
async def create_employee(
    data: EmployeeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.CREATE))
):
    """Create a new employee."""
    return ok(employee_service.create_employee(db, data, current_user.id), "Employee created successfully")


@router.put("/{employee_id}", response_model=ApiResponse[EmployeeResponse])
async def update_employee(
    employee_id: int,
    data: EmployeeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.UPDATE))
):
    """Update employee."""
    return ok(
        employee_service.update_employee(db, employee_id, data, current_user.id),
        "Employee updated successfully"
    )


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.EMPLOYEES, Action.DELETE))
):
    """Soft-delete an employee."""
    employee_service.delete_employee(db, employee_id, current_user.id)
    return ok(None, "Employee deleted successfully")
