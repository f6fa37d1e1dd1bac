from datetime import date, datetime
from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import ConflictError, NotFoundError
from electrical_pm.models.project import Project, ProjectMember
from electrical_pm.models.user import User
from electrical_pm.schemas.project import ProjectCreate, ProjectUpdate
from electrical_pm.services.client_service import client_service
import logging

logger = logging.getLogger(__name__)


class ProjectService:

    def get_project(self, db: Session, project_id: int) -> Project:
        project = db.query(Project).filter(
            Project.id == project_id,
            Project.deleted_at.is_(None)
        ).first()
        if not project:
            raise NotFoundError("Project not found")
        return project

    def list_projects(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        search: Optional[str] = None,
        status: Optional[str] = None,
        project_type: Optional[str] = None,
        client_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        min_budget: Optional[float] = None,
        max_budget: Optional[float] = None
    ) -> Tuple[List[Project], int]:
        """List non-deleted projects, newest first, with optional filters."""
        query = db.query(Project).filter(Project.deleted_at.is_(None))

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Project.name.ilike(pattern),
                Project.project_number.ilike(pattern),
                Project.description.ilike(pattern)
            ))
        if status:
            query = query.filter(Project.status == status)
        if project_type:
            query = query.filter(Project.type == project_type)
        if client_id:
            query = query.filter(Project.client_id == client_id)
        if start_date:
            query = query.filter(Project.start_date >= start_date)
        if end_date:
            query = query.filter(Project.start_date <= end_date)
        if min_budget is not None:
            query = query.filter(Project.budget >= min_budget)
        if max_budget is not None:
            query = query.filter(Project.budget <= max_budget)

        total = query.count()
        projects = query.order_by(Project.created_at.desc(), Project.id.desc()).offset(offset).limit(limit).all()
        return projects, total

    def _check_project_number(self, db: Session, project_number: Optional[str], exclude_id: Optional[int] = None):
        if not project_number:
            return
        query = db.query(Project).filter(
            Project.project_number == project_number,
            Project.deleted_at.is_(None)
        )
        if exclude_id:
            query = query.filter(Project.id != exclude_id)
        if query.first():
            raise ConflictError(f"Project number {project_number} already exists")

    def create_project(self, db: Session, data: ProjectCreate, actor_id: int) -> Project:
        client_service.get_client(db, data.client_id)
        self._check_project_number(db, data.project_number)

        project = Project(**data.model_dump(), created_by=actor_id, updated_by=actor_id)
        db.add(project)
        db.commit()
        db.refresh(project)

        logger.info(f"Project {project.id} ({project.name}) created by user {actor_id}")
        return project

    def update_project(self, db: Session, project_id: int, data: ProjectUpdate, actor_id: int) -> Project:
        project = self.get_project(db, project_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("client_id"):
            client_service.get_client(db, update_data["client_id"])
        self._check_project_number(db, update_data.get("project_number"), exclude_id=project.id)

        for field, value in update_data.items():
            setattr(project, field, value)
        project.updated_by = actor_id

        db.commit()
        db.refresh(project)

        logger.info(f"Project {project.id} updated by user {actor_id}: {sorted(update_data)}")
        return project

    def delete_project(self, db: Session, project_id: int, actor_id: int) -> None:
        project = self.get_project(db, project_id)
        project.deleted_at = datetime.utcnow()
        project.updated_by = actor_id
        db.commit()

        logger.info(f"Project {project_id} deleted by user {actor_id}")

    # Members

    def list_members(self, db: Session, project_id: int) -> List[ProjectMember]:
        self.get_project(db, project_id)
        return db.query(ProjectMember).filter(
            ProjectMember.project_id == project_id
        ).order_by(ProjectMember.assigned_at.asc()).all()

    def add_member(
        self,
        db: Session,
        project_id: int,
        user_id: int,
        actor_id: int,
        role: Optional[str] = None
    ) -> ProjectMember:
        self.get_project(db, project_id)

        user = db.query(User).filter(
            User.id == user_id,
            User.deleted_at.is_(None),
            User.is_active.is_(True)
        ).first()
        if not user:
            raise NotFoundError("User not found or inactive")

        existing = db.query(ProjectMember).filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id
        ).first()
        if existing:
            raise ConflictError("User is already assigned to this project")

        member = ProjectMember(project_id=project_id, user_id=user_id, role=role)
        db.add(member)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("User is already assigned to this project")
        db.refresh(member)

        logger.info(f"User {user_id} assigned to project {project_id} by user {actor_id}")
        return member

    def remove_member(self, db: Session, project_id: int, user_id: int, actor_id: int) -> None:
        self.get_project(db, project_id)
        member = db.query(ProjectMember).filter(
            ProjectMember.project_id == project_id,
            ProjectMember.user_id == user_id
        ).first()
        if not member:
            raise NotFoundError("User is not assigned to this project")

        db.delete(member)
        db.commit()

        logger.info(f"User {user_id} removed from project {project_id} by user {actor_id}")


# Singleton instance
project_service = ProjectService()
