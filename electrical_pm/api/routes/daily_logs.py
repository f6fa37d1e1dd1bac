from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.exceptions import ValidationError
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.daily_log import DailyLogCreate, DailyLogResponse, DailyLogStats, DailyLogUpdate
from electrical_pm.services.daily_log_service import daily_log_service

router = APIRouter(prefix="/daily-logs", tags=["Daily Logs"])


@router.get("/stats", response_model=ApiResponse[DailyLogStats])
async def get_daily_log_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.READ))
):
    """Log counts and the most recent entries."""
    return ok(daily_log_service.get_stats(db))


@router.get("/date-range", response_model=ApiResponse[List[DailyLogResponse]])
async def get_by_date_range(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.READ))
):
    """Logs between two dates, inclusive."""
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date")
    return ok(daily_log_service.get_by_date_range(db, start_date, end_date))


@router.get("/project/{project_id}", response_model=ApiResponse[List[DailyLogResponse]])
async def get_by_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.READ))
):
    """All logs of a project, newest first."""
    return ok(daily_log_service.get_by_project(db, project_id))


@router.get("", response_model=PaginatedResponse[DailyLogResponse])
async def list_daily_logs(
    page: PageParams = Depends(),
    project_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.READ))
):
    """List daily logs with filtering."""
    logs, total = daily_log_service.list_daily_logs(
        db, page.offset, page.limit,
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        search=search
    )
    return paginated(logs, total, page)


@router.get("/{log_id}", response_model=ApiResponse[DailyLogResponse])
async def get_daily_log(
    log_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.READ))
):
    """Get daily log by ID."""
    return ok(daily_log_service.get_daily_log(db, log_id))


@router.post("", response_model=ApiResponse[DailyLogResponse], status_code=status.HTTP_201_CREATED)
async def create_daily_log(
    data: DailyLogCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.CREATE))
):
    """Create the log for a project and day."""
    return ok(daily_log_service.create_daily_log(db, data, current_user.id), "Daily log created successfully")


@router.put("/{log_id}", response_model=ApiResponse[DailyLogResponse])
async def update_daily_log(
    log_id: int,
    data: DailyLogUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.UPDATE))
):
    """Update daily log."""
    return ok(daily_log_service.update_daily_log(db, log_id, data, current_user.id), "Daily log updated successfully")


@router.delete("/{log_id}", response_model=MessageResponse)
async def delete_daily_log(
    log_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.DAILY_LOGS, Action.DELETE))
):
    """Soft-delete a daily log."""
    daily_log_service.delete_daily_log(db, log_id, current_user.id)
    return ok(None, "Daily log deleted successfully")
