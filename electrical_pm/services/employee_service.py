from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import ConflictError, NotFoundError
from electrical_pm.models.employee import Employee
from electrical_pm.models.user import User
from electrical_pm.schemas.employee import EmployeeCreate, EmployeeUpdate
import logging

logger = logging.getLogger(__name__)


class EmployeeService:
    """Employee records: the people whose time is tracked and paid."""

    def _base_query(self, db: Session):
        return db.query(Employee).filter(Employee.deleted_at.is_(None))

    def get_employee(self, db: Session, employee_id: int) -> Employee:
        employee = self._base_query(db).filter(Employee.id == employee_id).first()
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_employees(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        search: Optional[str] = None,
        classification: Optional[str] = None,
        employment_status: Optional[str] = None,
        department: Optional[str] = None,
        include_inactive: bool = False
    ) -> Tuple[List[Employee], int]:
        query = self._base_query(db)

        if not include_inactive:
            query = query.filter(Employee.is_active.is_(True))
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Employee.first_name.ilike(pattern),
                Employee.last_name.ilike(pattern),
                Employee.email.ilike(pattern),
                Employee.employee_number.ilike(pattern)
            ))
        if classification:
            query = query.filter(Employee.classification == classification)
        if employment_status:
            query = query.filter(Employee.employment_status == employment_status)
        if department:
            query = query.filter(Employee.department == department)

        total = query.count()
        employees = query.order_by(
            Employee.last_name.asc(), Employee.first_name.asc()
        ).offset(offset).limit(limit).all()
        return employees, total

    def _check_unique(
        self,
        db: Session,
        employee_number: Optional[str],
        user_id: Optional[int],
        exclude_id: Optional[int] = None
    ):
        if employee_number:
            query = db.query(Employee).filter(Employee.employee_number == employee_number)
            if exclude_id:
                query = query.filter(Employee.id != exclude_id)
            if query.first():
                raise ConflictError(f"Employee number {employee_number} already exists")

        if user_id:
            user = db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
            if not user:
                raise NotFoundError("User not found")
            query = db.query(Employee).filter(Employee.user_id == user_id)
            if exclude_id:
                query = query.filter(Employee.id != exclude_id)
            if query.first():
                raise ConflictError("User is already linked to another employee")

    def create_employee(self, db: Session, data: EmployeeCreate, actor_id: int) -> Employee:
        self._check_unique(db, data.employee_number, data.user_id)

        employee = Employee(**data.model_dump(), created_by=actor_id, updated_by=actor_id)
        db.add(employee)
        db.commit()
        db.refresh(employee)

        logger.info(f"Employee {employee.id} ({employee.full_name}) created by user {actor_id}")
        return employee

    def update_employee(self, db: Session, employee_id: int, data: EmployeeUpdate, actor_id: int) -> Employee:
        employee = self.get_employee(db, employee_id)
        update_data = data.model_dump(exclude_unset=True)

        self._check_unique(
            db,
            update_data.get("employee_number"),
            update_data.get("user_id"),
            exclude_id=employee.id
        )

        for field, value in update_data.items():
            setattr(employee, field, value)
        employee.updated_by = actor_id

        db.commit()
        db.refresh(employee)

        logger.info(f"Employee {employee.id} updated by user {actor_id}: {sorted(update_data)}")
        return employee

    def delete_employee(self, db: Session, employee_id: int, actor_id: int) -> None:
        employee = self.get_employee(db, employee_id)
        employee.deleted_at = datetime.utcnow()
        employee.is_active = False
        employee.updated_by = actor_id
        db.commit()

        logger.info(f"Employee {employee_id} deleted by user {actor_id}")

    def get_classifications(self, db: Session) -> List[str]:
        rows = self._base_query(db).with_entities(Employee.classification).distinct().order_by(
            Employee.classification
        ).all()
        return [row[0] for row in rows]

    def get_stats(self, db: Session) -> Dict:
        query = self._base_query(db)
        total = query.count()
        active = query.filter(Employee.is_active.is_(True)).count()

        by_classification = dict(
            query.with_entities(Employee.classification, func.count(Employee.id))
            .group_by(Employee.classification).all()
        )
        by_employment_status = dict(
            query.with_entities(Employee.employment_status, func.count(Employee.id))
            .group_by(Employee.employment_status).all()
        )

        return {
            "total": total,
            "active": active,
            "inactive": total - active,
            "by_classification": by_classification,
            "by_employment_status": by_employment_status,
        }


# Singleton instance
employee_service = EmployeeService()
