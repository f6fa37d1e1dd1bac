from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import ok
from electrical_pm.models.time_entry import TimeEntryStatus
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse
from electrical_pm.schemas.time_entry import (
    DayTotal, TimeEntryBulkCreate, TimeEntryCreate, TimeEntryFromSignIn,
    TimeEntryReject, TimeEntryResponse, TimeEntryUpdate
)
from electrical_pm.services.time_entry_service import time_entry_service

router = APIRouter(prefix="/time-entries", tags=["Time Entries"])


@router.get("/date", response_model=ApiResponse[List[TimeEntryResponse]])
async def get_entries_for_date(
    work_date: date = Query(..., alias="date"),
    employee_id: Optional[int] = None,
    project_id: Optional[int] = None,
    status: Optional[TimeEntryStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.READ))
):
    """Time entries for a given day."""
    entries = time_entry_service.get_for_date(
        db, work_date,
        employee_id=employee_id,
        project_id=project_id,
        status=status.value if status else None
    )
    return ok(entries)


@router.get("/unapproved", response_model=ApiResponse[List[TimeEntryResponse]])
async def get_unapproved_entries(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.READ))
):
    """Entries still waiting for approval."""
    return ok(time_entry_service.get_unapproved(db))


@router.get("/employee/{employee_id}/day-total", response_model=ApiResponse[DayTotal])
async def get_day_total(
    employee_id: int,
    work_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.READ))
):
    """Hours an employee has logged on a day."""
    return ok({
        "employee_id": employee_id,
        "date": work_date,
        "total_hours": time_entry_service.calculate_day_total(db, employee_id, work_date),
    })


@router.get("/employee/{employee_id}", response_model=ApiResponse[List[TimeEntryResponse]])
async def get_entries_for_employee(
    employee_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.READ))
):
    """An employee's entries, newest first."""
    return ok(time_entry_service.get_for_employee(db, employee_id, start_date=start_date, end_date=end_date))


@router.get("/project/{project_id}", response_model=ApiResponse[List[TimeEntryResponse]])
async def get_entries_for_project(
    project_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.READ))
):
    """A project's entries, newest first."""
    return ok(time_entry_service.get_for_project(db, project_id, start_date=start_date, end_date=end_date))


@router.get("/{entry_id}", response_model=ApiResponse[TimeEntryResponse])
async def get_time_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.READ))
):
    """Get time entry by ID."""
    return ok(time_entry_service.get_time_entry(db, entry_id))


@router.post("", response_model=ApiResponse[TimeEntryResponse], status_code=status.HTTP_201_CREATED)
async def create_time_entry(
    data: TimeEntryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.CREATE))
):
    """Log hours for an employee on a project."""
    return ok(time_entry_service.create_time_entry(db, data, current_user.id), "Time entry created successfully")


@router.post("/bulk", response_model=ApiResponse[List[TimeEntryResponse]], status_code=status.HTTP_201_CREATED)
async def bulk_create_time_entries(
    data: TimeEntryBulkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.CREATE))
):
    """
    Create several entries at once.
    Nothing is written unless every entry is valid.
    """
    entries = time_entry_service.bulk_create(db, data.entries, current_user.id)
    return ok(entries, f"{len(entries)} time entries created")


@router.post("/from-sign-in", response_model=ApiResponse[TimeEntryResponse], status_code=status.HTTP_201_CREATED)
async def create_from_sign_in(
    data: TimeEntryFromSignIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.CREATE))
):
    """Derive an entry from a completed sign-in."""
    entry = time_entry_service.auto_create_from_sign_in(db, data.sign_in_id, data.project_id, current_user.id)
    return ok(entry, "Time entry created from sign-in")


@router.put("/{entry_id}", response_model=ApiResponse[TimeEntryResponse])
async def update_time_entry(
    entry_id: int,
    data: TimeEntryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.UPDATE))
):
    """Update time entry."""
    return ok(
        time_entry_service.update_time_entry(db, entry_id, data, current_user.id),
        "Time entry updated successfully"
    )


@router.put("/{entry_id}/approve", response_model=ApiResponse[TimeEntryResponse])
async def approve_time_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.APPROVE))
):
    """Approve a time entry."""
    return ok(time_entry_service.approve_time_entry(db, entry_id, current_user.id), "Time entry approved")


@router.put("/{entry_id}/reject", response_model=ApiResponse[TimeEntryResponse])
async def reject_time_entry(
    entry_id: int,
    data: TimeEntryReject,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.APPROVE))
):
    """Reject a time entry with a reason."""
    return ok(
        time_entry_service.reject_time_entry(db, entry_id, current_user.id, data.reason),
        "Time entry rejected"
    )


@router.delete("/{entry_id}", response_model=MessageResponse)
async def delete_time_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIME_ENTRIES, Action.DELETE))
):
    """Delete time entry."""
    time_entry_service.delete_time_entry(db, entry_id, current_user.id)
    return ok(None, "Time entry deleted successfully")
