from datetime import date
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import ok
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse
from electrical_pm.schemas.payroll import DailyReport, PayrollSummary, ProjectCostReport, WeeklyReport
from electrical_pm.services.payroll_service import payroll_service

router = APIRouter(prefix="/payroll", tags=["Payroll"])


@router.get("/daily", response_model=ApiResponse[DailyReport])
async def get_daily_report(
    work_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PAYROLL, Action.READ))
):
    """Hours per employee for one day, with 8h daily overtime."""
    return ok(payroll_service.generate_daily_report(db, work_date))


@router.get("/weekly", response_model=ApiResponse[WeeklyReport])
async def get_weekly_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PAYROLL, Action.READ))
):
    """Hours per employee over a range, with 40h overtime."""
    return ok(payroll_service.generate_weekly_report(db, start_date, end_date))


@router.get("/summary", response_model=ApiResponse[PayrollSummary])
async def get_payroll_summary(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PAYROLL, Action.READ))
):
    """Labor totals and top projects for a period."""
    return ok(payroll_service.get_payroll_summary(db, start_date, end_date))


@router.get("/project/{project_id}", response_model=ApiResponse[ProjectCostReport])
async def get_project_cost_report(
    project_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PAYROLL, Action.READ))
):
    """Labor cost of a project per employee."""
    return ok(payroll_service.generate_project_cost_report(db, project_id, start_date=start_date, end_date=end_date))


@router.get("/export/daily")
async def export_daily_payroll(
    work_date: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PAYROLL, Action.READ))
):
    """Daily payroll as a CSV download."""
    csv_buffer = payroll_service.export_daily_csv(db, work_date)

    return StreamingResponse(
        csv_buffer,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=payroll_daily_{work_date.isoformat()}.csv"}
    )


@router.get("/export/weekly")
async def export_weekly_payroll(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PAYROLL, Action.READ))
):
    """Weekly payroll as a CSV download."""
    csv_buffer = payroll_service.export_weekly_csv(db, start_date, end_date)

    return StreamingResponse(
        csv_buffer,
        media_type="text/csv",
        headers={
            "Content-Disposition": (
                f"attachment; filename=payroll_weekly_{start_date.isoformat()}_{end_date.isoformat()}.csv"
            )
        }
    )
