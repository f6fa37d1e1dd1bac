from datetime import date
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.project import ProjectStatus, ProjectType
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.project import (
    ProjectCreate, ProjectMemberCreate, ProjectMemberResponse, ProjectResponse, ProjectUpdate
)
from electrical_pm.services.project_service import project_service

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=PaginatedResponse[ProjectResponse])
async def list_projects(
    page: PageParams = Depends(),
    search: Optional[str] = None,
    status: Optional[ProjectStatus] = None,
    type: Optional[ProjectType] = None,
    client_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    min_budget: Optional[float] = None,
    max_budget: Optional[float] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.READ))
):
    """List projects with filtering."""
    projects, total = project_service.list_projects(
        db, page.offset, page.limit,
        search=search,
        status=status.value if status else None,
        project_type=type.value if type else None,
        client_id=client_id,
        start_date=start_date,
        end_date=end_date,
        min_budget=min_budget,
        max_budget=max_budget
    )
    return paginated(projects, total, page)


@router.get("/{project_id}", response_model=ApiResponse[ProjectResponse])
async def get_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.READ))
):
    """Get project by ID."""
    return ok(project_service.get_project(db, project_id))


@router.post("", response_model=ApiResponse[ProjectResponse], status_code=status.HTTP_201_CREATED)
async def create_project(
    data: ProjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.CREATE))
):
    """Create a new project."""
    return ok(project_service.create_project(db, data, current_user.id), "Project created successfully")


@router.put("/{project_id}", response_model=ApiResponse[ProjectResponse])
async def update_project(
    project_id: int,
    data: ProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.UPDATE))
):
    """Update project."""
    return ok(project_service.update_project(db, project_id, data, current_user.id), "Project updated successfully")


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.DELETE))
):
    """Soft-delete a project."""
    project_service.delete_project(db, project_id, current_user.id)
    return ok(None, "Project deleted successfully")


@router.get("/{project_id}/members", response_model=ApiResponse[List[ProjectMemberResponse]])
async def list_members(
    project_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.READ))
):
    """Users assigned to the project."""
    return ok(project_service.list_members(db, project_id))


@router.post(
    "/{project_id}/members",
    response_model=ApiResponse[ProjectMemberResponse],
    status_code=status.HTTP_201_CREATED
)
async def add_member(
    project_id: int,
    data: ProjectMemberCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.UPDATE))
):
    """Assign a user to the project."""
    member = project_service.add_member(db, project_id, data.user_id, current_user.id, role=data.role)
    return ok(member, "Member added successfully")


@router.delete("/{project_id}/members/{user_id}", response_model=MessageResponse)
async def remove_member(
    project_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.PROJECTS, Action.UPDATE))
):
    """Unassign a user from the project."""
    project_service.remove_member(db, project_id, user_id, current_user.id)
    return ok(None, "Member removed successfully")
