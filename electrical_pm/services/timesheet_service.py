from datetime import date, datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from electrical_pm.core.database import transaction
from electrical_pm.core.exceptions import ConflictError, NotFoundError
from electrical_pm.models.time_entry import TimeEntryStatus
from electrical_pm.models.timesheet import Timesheet, TimesheetStatus
from electrical_pm.schemas.timesheet import TimesheetCreate, TimesheetUpdate
from electrical_pm.services.time_entry_service import time_entry_service
import logging

logger = logging.getLogger(__name__)

LOCKED_MESSAGE = "Cannot edit approved timesheet"


class TimesheetService:
    """Timesheets group time entries under a DRAFT -> SUBMITTED -> APPROVED workflow.

    Once approved a timesheet and all of its entries are locked. Every write
    that touches both the timesheet and its entries runs in one transaction.
    """

    def get_timesheet(self, db: Session, timesheet_id: int) -> Timesheet:
        timesheet = db.query(Timesheet).filter(Timesheet.id == timesheet_id).first()
        if not timesheet:
            raise NotFoundError("Timesheet not found")
        return timesheet

    def list_timesheets(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        created_by: Optional[int] = None
    ) -> Tuple[List[Timesheet], int]:
        query = db.query(Timesheet)

        if status:
            query = query.filter(Timesheet.status == status)
        if start_date:
            query = query.filter(Timesheet.date >= start_date)
        if end_date:
            query = query.filter(Timesheet.date <= end_date)
        if created_by:
            query = query.filter(Timesheet.created_by == created_by)

        total = query.count()
        timesheets = query.order_by(Timesheet.date.desc(), Timesheet.id.desc()).offset(offset).limit(limit).all()
        return timesheets, total

    def get_for_date(self, db: Session, work_date: date) -> List[Timesheet]:
        return db.query(Timesheet).filter(Timesheet.date == work_date).order_by(Timesheet.id.asc()).all()

    def create_timesheet(self, db: Session, data: TimesheetCreate, actor_id: int) -> Timesheet:
        time_entry_service.validate_entries(db, data.entries)

        timesheet = Timesheet(
            date=data.date,
            title=data.title,
            notes=data.notes,
            status=TimesheetStatus.DRAFT.value,
            created_by=actor_id,
            updated_by=actor_id
        )
        with transaction(db):
            db.add(timesheet)
            timesheet.time_entries = [
                time_entry_service.build_entry(entry, data.date, actor_id)
                for entry in data.entries
            ]
        db.refresh(timesheet)

        logger.info(
            f"Timesheet {timesheet.id} for {timesheet.date} created by user {actor_id} "
            f"with {len(data.entries)} entries"
        )
        return timesheet

    def update_timesheet(self, db: Session, timesheet_id: int, data: TimesheetUpdate, actor_id: int) -> Timesheet:
        timesheet = self.get_timesheet(db, timesheet_id)
        if timesheet.is_locked:
            raise ConflictError(LOCKED_MESSAGE)

        update_data = data.model_dump(exclude_unset=True, exclude={"entries"})
        if data.entries is not None:
            time_entry_service.validate_entries(db, data.entries)

        with transaction(db):
            for field, value in update_data.items():
                setattr(timesheet, field, value)
            timesheet.updated_by = actor_id

            if data.entries is not None:
                # Replace: delete-orphan removes the old rows in this same unit of work
                timesheet.time_entries = [
                    time_entry_service.build_entry(entry, timesheet.date, actor_id)
                    for entry in data.entries
                ]
            elif "date" in update_data:
                for entry in timesheet.time_entries:
                    entry.date = timesheet.date
                    entry.updated_by = actor_id
        db.refresh(timesheet)

        logger.info(f"Timesheet {timesheet.id} updated by user {actor_id}")
        return timesheet

    def submit_timesheet(self, db: Session, timesheet_id: int, actor_id: int) -> Timesheet:
        timesheet = self.get_timesheet(db, timesheet_id)
        if timesheet.is_locked:
            raise ConflictError("Approved timesheets cannot be resubmitted")

        timesheet.status = TimesheetStatus.SUBMITTED.value
        timesheet.submitted_by = actor_id
        timesheet.submitted_at = datetime.utcnow()
        timesheet.updated_by = actor_id
        db.commit()
        db.refresh(timesheet)

        logger.info(f"Timesheet {timesheet.id} submitted by user {actor_id}")
        return timesheet

    def approve_timesheet(self, db: Session, timesheet_id: int, actor_id: int) -> Timesheet:
        """Approve the timesheet and every entry it owns.

        Approving an already approved timesheet changes nothing; the original
        approver and timestamp are kept.
        """
        timesheet = self.get_timesheet(db, timesheet_id)
        if timesheet.is_locked:
            logger.info(f"Timesheet {timesheet.id} already approved, ignoring approval by user {actor_id}")
            return timesheet

        approved_at = datetime.utcnow()
        with transaction(db):
            timesheet.status = TimesheetStatus.APPROVED.value
            timesheet.approved_by = actor_id
            timesheet.approved_at = approved_at
            timesheet.updated_by = actor_id
            for entry in timesheet.time_entries:
                entry.status = TimeEntryStatus.APPROVED.value
                entry.approved_by = actor_id
                entry.approved_at = approved_at
                entry.rejection_reason = None
        db.refresh(timesheet)

        logger.info(
            f"Timesheet {timesheet.id} approved by user {actor_id} ({len(timesheet.time_entries)} entries)"
        )
        return timesheet

    def delete_timesheet(self, db: Session, timesheet_id: int, actor_id: int) -> None:
        timesheet = self.get_timesheet(db, timesheet_id)
        if timesheet.status != TimesheetStatus.DRAFT.value:
            raise ConflictError("Only draft timesheets can be deleted")

        entry_count = len(timesheet.time_entries)
        with transaction(db):
            db.delete(timesheet)

        logger.info(f"Timesheet {timesheet_id} deleted by user {actor_id} ({entry_count} entries removed)")


# Singleton instance
timesheet_service = TimesheetService()
