from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import ConflictError, NotFoundError, ValidationError
from electrical_pm.models.daily_log import DailyLog
from electrical_pm.schemas.daily_log import DailyLogCreate, DailyLogUpdate
from electrical_pm.services.project_service import project_service
import logging

logger = logging.getLogger(__name__)

RECENT_LOG_LIMIT = 5


class DailyLogService:
    """Site diaries: one log per project and day."""

    def _base_query(self, db: Session):
        return db.query(DailyLog).filter(DailyLog.deleted_at.is_(None))

    def get_daily_log(self, db: Session, log_id: int) -> DailyLog:
        log = self._base_query(db).filter(DailyLog.id == log_id).first()
        if not log:
            raise NotFoundError("Daily log not found")
        return log

    def _ensure_unique(self, db: Session, project_id: int, log_date: date, exclude_id: Optional[int] = None):
        query = self._base_query(db).filter(
            DailyLog.project_id == project_id,
            DailyLog.date == log_date
        )
        if exclude_id:
            query = query.filter(DailyLog.id != exclude_id)
        if query.first():
            raise ConflictError("Daily log already exists for this project and date")

    def list_daily_logs(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        project_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None
    ) -> Tuple[List[DailyLog], int]:
        query = self._base_query(db)

        if project_id:
            query = query.filter(DailyLog.project_id == project_id)
        if start_date:
            query = query.filter(DailyLog.date >= start_date)
        if end_date:
            query = query.filter(DailyLog.date <= end_date)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                DailyLog.work_performed.ilike(pattern),
                DailyLog.issues.ilike(pattern),
                DailyLog.equipment_used.ilike(pattern)
            ))

        total = query.count()
        logs = query.order_by(DailyLog.date.desc(), DailyLog.id.desc()).offset(offset).limit(limit).all()
        return logs, total

    def get_by_project(self, db: Session, project_id: int) -> List[DailyLog]:
        project_service.get_project(db, project_id)
        return self._base_query(db).filter(
            DailyLog.project_id == project_id
        ).order_by(DailyLog.date.desc()).all()

    def get_by_date_range(self, db: Session, start_date: date, end_date: date) -> List[DailyLog]:
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        return self._base_query(db).filter(
            DailyLog.date >= start_date,
            DailyLog.date <= end_date
        ).order_by(DailyLog.date.desc(), DailyLog.id.desc()).all()

    def create_daily_log(self, db: Session, data: DailyLogCreate, actor_id: int) -> DailyLog:
        project_service.get_project(db, data.project_id)
        self._ensure_unique(db, data.project_id, data.date)

        log = DailyLog(**data.model_dump(), created_by=actor_id, updated_by=actor_id)
        db.add(log)
        db.commit()
        db.refresh(log)

        logger.info(f"Daily log {log.id} for project {log.project_id} on {log.date} created by user {actor_id}")
        return log

    def update_daily_log(self, db: Session, log_id: int, data: DailyLogUpdate, actor_id: int) -> DailyLog:
        log = self.get_daily_log(db, log_id)
        update_data = data.model_dump(exclude_unset=True)

        if "date" in update_data and update_data["date"] != log.date:
            self._ensure_unique(db, log.project_id, update_data["date"], exclude_id=log.id)

        for field, value in update_data.items():
            setattr(log, field, value)
        log.updated_by = actor_id

        db.commit()
        db.refresh(log)
        return log

    def delete_daily_log(self, db: Session, log_id: int, actor_id: int) -> None:
        log = self.get_daily_log(db, log_id)
        log.deleted_at = datetime.utcnow()
        log.updated_by = actor_id
        db.commit()

        logger.info(f"Daily log {log_id} deleted by user {actor_id}")

    def get_stats(self, db: Session, today: Optional[date] = None) -> Dict:
        today = today or date.today()
        month_start = today.replace(day=1)
        week_start = today - timedelta(days=today.weekday())

        query = self._base_query(db)
        return {
            "total_logs": query.count(),
            "this_month_logs": query.filter(DailyLog.date >= month_start, DailyLog.date <= today).count(),
            "this_week_logs": query.filter(DailyLog.date >= week_start, DailyLog.date <= today).count(),
            "recent_logs": query.order_by(
                DailyLog.date.desc(), DailyLog.id.desc()
            ).limit(RECENT_LOG_LIMIT).all(),
        }


# Singleton instance
daily_log_service = DailyLogService()
