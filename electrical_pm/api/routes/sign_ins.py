from datetime import date
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import ok
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse
from electrical_pm.schemas.sign_in import (
    BulkSignInCreate, BulkSignInResult, SignInCreate, SignInResponse, SignInStatus, SignOutRequest
)
from electrical_pm.services.employee_service import employee_service
from electrical_pm.services.sign_in_service import sign_in_service

router = APIRouter(prefix="/sign-ins", tags=["Sign-ins"])


@router.get("/today", response_model=ApiResponse[List[SignInResponse]])
async def get_today_sign_ins(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.READ))
):
    """Everyone who signed in today."""
    return ok(sign_in_service.get_today_sign_ins(db))


@router.get("/active", response_model=ApiResponse[List[SignInResponse]])
async def get_active_sign_ins(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.READ))
):
    """Sign-ins for today that have no sign-out yet."""
    return ok(sign_in_service.get_active_sign_ins(db))


@router.get("/date", response_model=ApiResponse[List[SignInResponse]])
async def get_sign_ins_for_date(
    work_date: date = Query(..., alias="date"),
    employee_id: Optional[int] = None,
    project_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.READ))
):
    """Sign-ins recorded for a given day."""
    return ok(sign_in_service.get_sign_ins_for_date(db, work_date, employee_id=employee_id, project_id=project_id))


@router.get("/employee/{employee_id}/history", response_model=ApiResponse[List[SignInResponse]])
async def get_employee_history(
    employee_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.READ))
):
    """An employee's sign-ins, newest first."""
    employee_service.get_employee(db, employee_id)
    return ok(sign_in_service.get_employee_history(db, employee_id, start_date=start_date, end_date=end_date))


@router.get("/employee/{employee_id}/status", response_model=ApiResponse[SignInStatus])
async def get_employee_status(
    employee_id: int,
    work_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.READ))
):
    """Whether the employee is currently signed in."""
    employee_service.get_employee(db, employee_id)
    work_date = work_date or date.today()
    return ok({
        "employee_id": employee_id,
        "date": work_date,
        "is_signed_in": sign_in_service.is_employee_signed_in(db, employee_id, work_date),
    })


@router.post("", response_model=ApiResponse[SignInResponse], status_code=status.HTTP_201_CREATED)
async def sign_in(
    data: SignInCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.CREATE))
):
    """Sign an employee in."""
    record = sign_in_service.sign_in(
        db, data.employee_id, current_user.id,
        work_date=data.date,
        sign_in_time=data.sign_in_time,
        location=data.location,
        project_id=data.project_id,
        notes=data.notes
    )
    return ok(record, "Employee signed in successfully")


@router.post("/bulk", response_model=ApiResponse[BulkSignInResult], status_code=status.HTTP_201_CREATED)
async def bulk_sign_in(
    data: BulkSignInCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.CREATE))
):
    """
    Sign in a crew at once.
    Employees who are already signed in are skipped and reported back.
    """
    records, already_signed_in = sign_in_service.bulk_sign_in(
        db, data.employee_ids, current_user.id,
        work_date=data.date,
        sign_in_time=data.sign_in_time,
        location=data.location,
        project_id=data.project_id
    )
    return ok(
        {"signed_in": records, "already_signed_in": already_signed_in},
        f"{len(records)} employees signed in"
    )


@router.put("/{sign_in_id}/sign-out", response_model=ApiResponse[SignInResponse])
async def sign_out(
    sign_in_id: int,
    data: Optional[SignOutRequest] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.SIGN_INS, Action.UPDATE))
):
    """Close an open sign-in."""
    record = sign_in_service.sign_out(
        db, sign_in_id, current_user.id,
        sign_out_time=data.sign_out_time if data else None,
        notes=data.notes if data else None
    )
    return ok(record, "Employee signed out successfully")
