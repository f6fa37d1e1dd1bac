from datetime import date, datetime, timezone
from typing import List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import ConflictError, NotFoundError, ValidationError
from electrical_pm.models.employee import Employee
from electrical_pm.models.sign_in import DailySignIn
from electrical_pm.services.employee_service import employee_service
from electrical_pm.services.project_service import project_service
import logging

logger = logging.getLogger(__name__)

ALREADY_SIGNED_IN = "Employee is already signed in and has not signed out yet"


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    """Store timestamps as naive UTC when the client sends an offset."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SignInService:
    """Attendance ledger: one open sign-in per employee and day."""

    def get_sign_in(self, db: Session, sign_in_id: int) -> DailySignIn:
        record = db.query(DailySignIn).filter(DailySignIn.id == sign_in_id).first()
        if not record:
            raise NotFoundError("Sign-in record not found")
        return record

    def get_active_sign_in(self, db: Session, employee_id: int, work_date: date) -> Optional[DailySignIn]:
        return db.query(DailySignIn).filter(
            DailySignIn.employee_id == employee_id,
            DailySignIn.date == work_date,
            DailySignIn.sign_out_time.is_(None)
        ).first()

    def is_employee_signed_in(self, db: Session, employee_id: int, work_date: Optional[date] = None) -> bool:
        return self.get_active_sign_in(db, employee_id, work_date or date.today()) is not None

    def sign_in(
        self,
        db: Session,
        employee_id: int,
        actor_id: int,
        work_date: Optional[date] = None,
        sign_in_time: Optional[datetime] = None,
        location: Optional[str] = None,
        project_id: Optional[int] = None,
        notes: Optional[str] = None
    ) -> DailySignIn:
        employee = employee_service.get_employee(db, employee_id)
        if not employee.is_active:
            raise ValidationError("Employee is not active")
        if project_id:
            project_service.get_project(db, project_id)

        sign_in_time = _naive(sign_in_time) or datetime.now()
        work_date = work_date or sign_in_time.date()

        if self.get_active_sign_in(db, employee_id, work_date):
            raise ConflictError(ALREADY_SIGNED_IN)

        record = DailySignIn(
            employee_id=employee_id,
            date=work_date,
            sign_in_time=sign_in_time,
            location=location,
            project_id=project_id,
            notes=notes,
            signed_in_by=actor_id
        )
        db.add(record)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent sign-in for the same employee and day
            db.rollback()
            raise ConflictError(ALREADY_SIGNED_IN)
        db.refresh(record)

        logger.info(f"Employee {employee_id} signed in for {work_date} by user {actor_id} (record {record.id})")
        return record

    def bulk_sign_in(
        self,
        db: Session,
        employee_ids: List[int],
        actor_id: int,
        work_date: Optional[date] = None,
        sign_in_time: Optional[datetime] = None,
        location: Optional[str] = None,
        project_id: Optional[int] = None
    ) -> Tuple[List[DailySignIn], List[int]]:
        """Sign in every employee without an open session.

        Returns the created records and the ids that were already signed in.
        """
        unique_ids = list(dict.fromkeys(employee_ids))

        found = {
            e.id for e in db.query(Employee).filter(
                Employee.id.in_(unique_ids),
                Employee.deleted_at.is_(None),
                Employee.is_active.is_(True)
            ).all()
        }
        missing = [employee_id for employee_id in unique_ids if employee_id not in found]
        if missing:
            raise NotFoundError(f"Employees not found or inactive: {', '.join(str(i) for i in missing)}")
        if project_id:
            project_service.get_project(db, project_id)

        sign_in_time = _naive(sign_in_time) or datetime.now()
        work_date = work_date or sign_in_time.date()

        active_ids = {
            record.employee_id for record in db.query(DailySignIn).filter(
                DailySignIn.employee_id.in_(unique_ids),
                DailySignIn.date == work_date,
                DailySignIn.sign_out_time.is_(None)
            ).all()
        }
        already_signed_in = [employee_id for employee_id in unique_ids if employee_id in active_ids]
        to_sign_in = [employee_id for employee_id in unique_ids if employee_id not in active_ids]

        if not to_sign_in:
            raise ConflictError("All selected employees are already signed in for this date")

        records = [
            DailySignIn(
                employee_id=employee_id,
                date=work_date,
                sign_in_time=sign_in_time,
                location=location,
                project_id=project_id,
                signed_in_by=actor_id
            )
            for employee_id in to_sign_in
        ]
        db.add_all(records)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("One or more employees were signed in concurrently, please retry")
        for record in records:
            db.refresh(record)

        logger.info(
            f"Bulk sign-in for {work_date} by user {actor_id}: "
            f"{len(records)} signed in, {len(already_signed_in)} already active"
        )
        return records, already_signed_in

    def sign_out(
        self,
        db: Session,
        sign_in_id: int,
        actor_id: int,
        sign_out_time: Optional[datetime] = None,
        notes: Optional[str] = None
    ) -> DailySignIn:
        record = self.get_sign_in(db, sign_in_id)
        if record.sign_out_time is not None:
            raise ConflictError("Employee is already signed out")

        sign_out_time = _naive(sign_out_time) or datetime.now()
        if sign_out_time < record.sign_in_time:
            raise ValidationError("Sign-out time cannot be before sign-in time")

        record.sign_out_time = sign_out_time
        record.signed_out_by = actor_id
        if notes:
            record.notes = notes

        db.commit()
        db.refresh(record)

        logger.info(f"Employee {record.employee_id} signed out (record {record.id}) by user {actor_id}")
        return record

    def get_sign_ins_for_date(
        self,
        db: Session,
        work_date: date,
        employee_id: Optional[int] = None,
        project_id: Optional[int] = None
    ) -> List[DailySignIn]:
        query = db.query(DailySignIn).filter(DailySignIn.date == work_date)
        if employee_id:
            query = query.filter(DailySignIn.employee_id == employee_id)
        if project_id:
            query = query.filter(DailySignIn.project_id == project_id)
        return query.order_by(DailySignIn.sign_in_time.desc()).all()

    def get_today_sign_ins(self, db: Session) -> List[DailySignIn]:
        return self.get_sign_ins_for_date(db, date.today())

    def get_active_sign_ins(self, db: Session) -> List[DailySignIn]:
        return db.query(DailySignIn).filter(
            DailySignIn.sign_out_time.is_(None)
        ).order_by(DailySignIn.sign_in_time.desc()).all()

    def get_employee_history(
        self,
        db: Session,
        employee_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[DailySignIn]:
        employee_service.get_employee(db, employee_id)
        query = db.query(DailySignIn).filter(DailySignIn.employee_id == employee_id)
        if start_date:
            query = query.filter(DailySignIn.date >= start_date)
        if end_date:
            query = query.filter(DailySignIn.date <= end_date)
        return query.order_by(DailySignIn.date.desc(), DailySignIn.sign_in_time.desc()).all()


# Singleton instance
sign_in_service = SignInService()
