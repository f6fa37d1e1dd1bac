from datetime import date, datetime
from typing import Iterable, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import ConflictError, NotFoundError, ValidationError
from electrical_pm.models.employee import Employee
from electrical_pm.models.project import Project
from electrical_pm.models.time_entry import TimeEntry, TimeEntryStatus, DEFAULT_WORK_TYPE
from electrical_pm.models.timesheet import Timesheet
from electrical_pm.schemas.time_entry import TimeEntryBase, TimeEntryCreate, TimeEntryUpdate
from electrical_pm.services.employee_service import employee_service
from electrical_pm.services.project_service import project_service
from electrical_pm.services.sign_in_service import sign_in_service
import logging

logger = logging.getLogger(__name__)

MIN_HOURS = 0
MAX_HOURS = 24


def hours_are_valid(hours: float) -> bool:
    return hours is not None and MIN_HOURS < hours <= MAX_HOURS


def compute_total_cost(hours: float, hourly_rate: Optional[float]) -> Optional[float]:
    if hourly_rate is None:
        return None
    return round(hours * hourly_rate, 2)


class TimeEntryService:
    """Hours worked per employee, project and day, with an approval status."""

    def get_time_entry(self, db: Session, entry_id: int) -> TimeEntry:
        entry = db.query(TimeEntry).filter(TimeEntry.id == entry_id).first()
        if not entry:
            raise NotFoundError("Time entry not found")
        return entry

    def _ensure_unlocked(self, entry: TimeEntry):
        if entry.timesheet is not None and entry.timesheet.is_locked:
            raise ConflictError("Time entry belongs to an approved timesheet and cannot be modified")

    def _check_references(self, db: Session, entries: Iterable[TimeEntryBase]):
        """Verify every referenced employee and project exists, with one query each."""
        entries = list(entries)
        employee_ids = {e.employee_id for e in entries}
        project_ids = {e.project_id for e in entries}

        found_employees = {
            row[0] for row in db.query(Employee.id).filter(
                Employee.id.in_(employee_ids), Employee.deleted_at.is_(None)
            ).all()
        }
        missing = sorted(employee_ids - found_employees)
        if missing:
            raise NotFoundError(f"Employee not found: {', '.join(str(i) for i in missing)}")

        found_projects = {
            row[0] for row in db.query(Project.id).filter(
                Project.id.in_(project_ids), Project.deleted_at.is_(None)
            ).all()
        }
        missing = sorted(project_ids - found_projects)
        if missing:
            raise NotFoundError(f"Project not found: {', '.join(str(i) for i in missing)}")

    def build_entry(
        self,
        data: TimeEntryBase,
        work_date: date,
        actor_id: int,
        timesheet_id: Optional[int] = None,
        sign_in_id: Optional[int] = None
    ) -> TimeEntry:
        """Instantiate a PENDING entry without adding it to a session."""
        return TimeEntry(
            employee_id=data.employee_id,
            project_id=data.project_id,
            timesheet_id=timesheet_id,
            sign_in_id=sign_in_id,
            date=work_date,
            hours_worked=data.hours_worked,
            work_type=data.work_type or DEFAULT_WORK_TYPE,
            description=data.description,
            task_performed=data.task_performed,
            hourly_rate=data.hourly_rate,
            total_cost=compute_total_cost(data.hours_worked, data.hourly_rate),
            start_time=data.start_time,
            end_time=data.end_time,
            status=TimeEntryStatus.PENDING.value,
            created_by=actor_id,
            updated_by=actor_id
        )

    def validate_entries(self, db: Session, entries: List[TimeEntryBase]):
        """Check every entry before anything is written."""
        for entry in entries:
            if not hours_are_valid(entry.hours_worked):
                raise ValidationError(
                    f"Invalid hours ({entry.hours_worked}) for employee {entry.employee_id}"
                )
        self._check_references(db, entries)

    def create_time_entry(self, db: Session, data: TimeEntryCreate, actor_id: int) -> TimeEntry:
        if not hours_are_valid(data.hours_worked):
            raise ValidationError("Hours worked must be between 0 and 24")
        self._check_references(db, [data])

        if data.timesheet_id:
            timesheet = db.query(Timesheet).filter(Timesheet.id == data.timesheet_id).first()
            if not timesheet:
                raise NotFoundError("Timesheet not found")
            if timesheet.is_locked:
                raise ConflictError("Cannot edit approved timesheet")
        if data.sign_in_id:
            sign_in_service.get_sign_in(db, data.sign_in_id)

        entry = self.build_entry(
            data, data.date, actor_id,
            timesheet_id=data.timesheet_id,
            sign_in_id=data.sign_in_id
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)

        logger.info(
            f"Time entry {entry.id} created by user {actor_id}: employee {entry.employee_id}, "
            f"project {entry.project_id}, {entry.date}, {entry.hours_worked}h"
        )
        return entry

    def bulk_create(self, db: Session, entries: List[TimeEntryCreate], actor_id: int) -> List[TimeEntry]:
        self.validate_entries(db, entries)

        created = [self.build_entry(data, data.date, actor_id) for data in entries]
        db.add_all(created)
        db.commit()
        for entry in created:
            db.refresh(entry)

        logger.info(f"Bulk created {len(created)} time entries by user {actor_id}")
        return created

    def update_time_entry(self, db: Session, entry_id: int, data: TimeEntryUpdate, actor_id: int) -> TimeEntry:
        entry = self.get_time_entry(db, entry_id)
        self._ensure_unlocked(entry)
        update_data = data.model_dump(exclude_unset=True)

        if "hours_worked" in update_data and not hours_are_valid(update_data["hours_worked"]):
            raise ValidationError("Hours worked must be between 0 and 24")
        if update_data.get("project_id"):
            project_service.get_project(db, update_data["project_id"])

        for field, value in update_data.items():
            setattr(entry, field, value)

        if "hours_worked" in update_data or "hourly_rate" in update_data:
            entry.total_cost = compute_total_cost(entry.hours_worked, entry.hourly_rate)
        entry.updated_by = actor_id

        db.commit()
        db.refresh(entry)

        logger.info(f"Time entry {entry.id} updated by user {actor_id}: {sorted(update_data)}")
        return entry

    def delete_time_entry(self, db: Session, entry_id: int, actor_id: int) -> None:
        entry = self.get_time_entry(db, entry_id)
        self._ensure_unlocked(entry)

        db.delete(entry)
        db.commit()

        logger.info(f"Time entry {entry_id} deleted by user {actor_id}")

    def approve_time_entry(self, db: Session, entry_id: int, actor_id: int) -> TimeEntry:
        entry = self.get_time_entry(db, entry_id)
        if entry.status == TimeEntryStatus.APPROVED.value:
            return entry

        entry.status = TimeEntryStatus.APPROVED.value
        entry.approved_by = actor_id
        entry.approved_at = datetime.utcnow()
        entry.rejection_reason = None

        db.commit()
        db.refresh(entry)

        logger.info(f"Time entry {entry.id} approved by user {actor_id}")
        return entry

    def reject_time_entry(self, db: Session, entry_id: int, actor_id: int, reason: str) -> TimeEntry:
        entry = self.get_time_entry(db, entry_id)
        self._ensure_unlocked(entry)

        entry.status = TimeEntryStatus.REJECTED.value
        entry.approved_by = actor_id
        entry.approved_at = datetime.utcnow()
        entry.rejection_reason = reason

        db.commit()
        db.refresh(entry)

        logger.info(f"Time entry {entry.id} rejected by user {actor_id}: {reason}")
        return entry

    def auto_create_from_sign_in(self, db: Session, sign_in_id: int, project_id: int, actor_id: int) -> TimeEntry:
        """Derive a time entry from a completed sign-in/sign-out pair."""
        record = sign_in_service.get_sign_in(db, sign_in_id)
        if record.sign_out_time is None:
            raise ValidationError("Employee has not signed out yet")

        existing = db.query(TimeEntry).filter(TimeEntry.sign_in_id == sign_in_id).first()
        if existing:
            raise ConflictError("A time entry was already created from this sign-in")

        hours = round((record.sign_out_time - record.sign_in_time).total_seconds() / 3600, 2)
        if not hours_are_valid(hours):
            raise ValidationError("Hours worked must be between 0 and 24")

        employee = employee_service.get_employee(db, record.employee_id)
        project_service.get_project(db, project_id)

        entry = TimeEntry(
            employee_id=employee.id,
            project_id=project_id,
            sign_in_id=record.id,
            date=record.date,
            hours_worked=hours,
            work_type=DEFAULT_WORK_TYPE,
            hourly_rate=employee.hourly_rate,
            total_cost=compute_total_cost(hours, employee.hourly_rate),
            start_time=record.sign_in_time,
            end_time=record.sign_out_time,
            status=TimeEntryStatus.PENDING.value,
            created_by=actor_id,
            updated_by=actor_id
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)

        logger.info(f"Time entry {entry.id} created from sign-in {sign_in_id} by user {actor_id}: {hours}h")
        return entry

    def get_for_date(
        self,
        db: Session,
        work_date: date,
        employee_id: Optional[int] = None,
        project_id: Optional[int] = None,
        status: Optional[str] = None
    ) -> List[TimeEntry]:
        query = db.query(TimeEntry).filter(TimeEntry.date == work_date)
        if employee_id:
            query = query.filter(TimeEntry.employee_id == employee_id)
        if project_id:
            query = query.filter(TimeEntry.project_id == project_id)
        if status:
            query = query.filter(TimeEntry.status == status)
        return query.order_by(TimeEntry.employee_id.asc(), TimeEntry.id.asc()).all()

    def get_for_employee(
        self,
        db: Session,
        employee_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[TimeEntry]:
        employee_service.get_employee(db, employee_id)
        query = db.query(TimeEntry).filter(TimeEntry.employee_id == employee_id)
        if start_date:
            query = query.filter(TimeEntry.date >= start_date)
        if end_date:
            query = query.filter(TimeEntry.date <= end_date)
        return query.order_by(TimeEntry.date.desc(), TimeEntry.id.asc()).all()

    def get_for_project(
        self,
        db: Session,
        project_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[TimeEntry]:
        project_service.get_project(db, project_id)
        query = db.query(TimeEntry).filter(TimeEntry.project_id == project_id)
        if start_date:
            query = query.filter(TimeEntry.date >= start_date)
        if end_date:
            query = query.filter(TimeEntry.date <= end_date)
        return query.order_by(TimeEntry.date.desc(), TimeEntry.id.asc()).all()

    def get_unapproved(self, db: Session) -> List[TimeEntry]:
        return db.query(TimeEntry).filter(
            TimeEntry.status == TimeEntryStatus.PENDING.value
        ).order_by(TimeEntry.date.asc(), TimeEntry.id.asc()).all()

    def calculate_day_total(self, db: Session, employee_id: int, work_date: date) -> float:
        """Sum of non-rejected hours for one employee on one day."""
        total = db.query(func.coalesce(func.sum(TimeEntry.hours_worked), 0.0)).filter(
            TimeEntry.employee_id == employee_id,
            TimeEntry.date == work_date,
            TimeEntry.status != TimeEntryStatus.REJECTED.value
        ).scalar()
        return round(float(total), 2)


# Singleton instance
time_entry_service = TimeEntryService()
