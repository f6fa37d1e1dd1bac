from datetime import date
from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.timesheet import TimesheetStatus
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.timesheet import TimesheetCreate, TimesheetListItem, TimesheetResponse, TimesheetUpdate
from electrical_pm.services.pdf_service import generate_timesheet_pdf
from electrical_pm.services.timesheet_service import timesheet_service

router = APIRouter(prefix="/timesheets", tags=["Timesheets"])


@router.get("", response_model=PaginatedResponse[TimesheetListItem])
async def list_timesheets(
    page: PageParams = Depends(),
    status: Optional[TimesheetStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    created_by: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.READ))
):
    """List timesheets, newest date first."""
    timesheets, total = timesheet_service.list_timesheets(
        db, page.offset, page.limit,
        status=status.value if status else None,
        start_date=start_date,
        end_date=end_date,
        created_by=created_by
    )
    return paginated(timesheets, total, page)


@router.get("/date/{work_date}", response_model=ApiResponse[List[TimesheetResponse]])
async def get_timesheets_for_date(
    work_date: date,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.READ))
):
    """Timesheets recorded for a day."""
    return ok(timesheet_service.get_for_date(db, work_date))


@router.get("/{timesheet_id}/pdf")
async def download_timesheet_pdf(
    timesheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.READ))
):
    """Printable timesheet."""
    timesheet = timesheet_service.get_timesheet(db, timesheet_id)
    return Response(
        content=generate_timesheet_pdf(timesheet),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=timesheet_{timesheet.id}_{timesheet.date.isoformat()}.pdf"
        }
    )


@router.get("/{timesheet_id}", response_model=ApiResponse[TimesheetResponse])
async def get_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.READ))
):
    """Get timesheet with its entries."""
    return ok(timesheet_service.get_timesheet(db, timesheet_id))


@router.post("", response_model=ApiResponse[TimesheetResponse], status_code=status.HTTP_201_CREATED)
async def create_timesheet(
    data: TimesheetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.CREATE))
):
    """Create a draft timesheet together with its entries."""
    return ok(timesheet_service.create_timesheet(db, data, current_user.id), "Timesheet created successfully")


@router.put("/{timesheet_id}", response_model=ApiResponse[TimesheetResponse])
async def update_timesheet(
    timesheet_id: int,
    data: TimesheetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.UPDATE))
):
    """Update a timesheet; passing entries replaces them all."""
    return ok(
        timesheet_service.update_timesheet(db, timesheet_id, data, current_user.id),
        "Timesheet updated successfully"
    )


@router.put("/{timesheet_id}/submit", response_model=ApiResponse[TimesheetResponse])
async def submit_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.UPDATE))
):
    """Submit a timesheet for approval."""
    return ok(timesheet_service.submit_timesheet(db, timesheet_id, current_user.id), "Timesheet submitted")


@router.put("/{timesheet_id}/approve", response_model=ApiResponse[TimesheetResponse])
async def approve_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.APPROVE))
):
    """Approve a timesheet and every entry on it."""
    return ok(timesheet_service.approve_timesheet(db, timesheet_id, current_user.id), "Timesheet approved")


@router.delete("/{timesheet_id}", response_model=MessageResponse)
async def delete_timesheet(
    timesheet_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.TIMESHEETS, Action.DELETE))
):
    """Delete a draft timesheet and its entries."""
    timesheet_service.delete_timesheet(db, timesheet_id, current_user.id)
    return ok(None, "Timesheet deleted successfully")
