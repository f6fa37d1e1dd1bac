from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.client import ClientType
from electrical_pm.models.project import ProjectStatus
from electrical_pm.models.user import User
from electrical_pm.schemas.client import (
    ClientCreate, ClientProjectsResponse, ClientResponse, ClientUpdate,
    ContactCreate, ContactResponse, ContactUpdate
)
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.services.client_service import client_service

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=PaginatedResponse[ClientResponse])
async def list_clients(
    page: PageParams = Depends(),
    search: Optional[str] = None,
    type: Optional[ClientType] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.READ))
):
    """List clients with search and type filter."""
    clients, total = client_service.list_clients(
        db, page.offset, page.limit,
        search=search,
        client_type=type.value if type else None
    )
    return paginated(clients, total, page)


@router.get("/{client_id}", response_model=ApiResponse[ClientResponse])
async def get_client(
    client_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.READ))
):
    """Get client by ID."""
    return ok(client_service.get_client(db, client_id))


@router.post("", response_model=ApiResponse[ClientResponse], status_code=status.HTTP_201_CREATED)
async def create_client(
    data: ClientCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.CREATE))
):
    """Create a new client."""
    return ok(client_service.create_client(db, data, current_user.id), "Client created successfully")


@router.put("/{client_id}", response_model=ApiResponse[ClientResponse])
async def update_client(
    client_id: int,
    data: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.UPDATE))
):
    """Update client."""
    return ok(client_service.update_client(db, client_id, data, current_user.id), "Client updated successfully")


@router.delete("/{client_id}", response_model=MessageResponse)
async def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.DELETE))
):
    """Soft-delete a client."""
    client_service.delete_client(db, client_id, current_user.id)
    return ok(None, "Client deleted successfully")


# Contacts

@router.get("/{client_id}/contacts", response_model=ApiResponse[List[ContactResponse]])
async def list_contacts(
    client_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.READ))
):
    """List a client's contacts, primary first."""
    return ok(client_service.list_contacts(db, client_id))


@router.get("/{client_id}/contacts/{contact_id}", response_model=ApiResponse[ContactResponse])
async def get_contact(
    client_id: int,
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.READ))
):
    """Get a single contact."""
    return ok(client_service.get_contact(db, client_id, contact_id))


@router.post(
    "/{client_id}/contacts",
    response_model=ApiResponse[ContactResponse],
    status_code=status.HTTP_201_CREATED
)
async def create_contact(
    client_id: int,
    data: ContactCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.CREATE))
):
    """Add a contact to a client."""
    return ok(client_service.create_contact(db, client_id, data), "Contact created successfully")


@router.put("/{client_id}/contacts/{contact_id}", response_model=ApiResponse[ContactResponse])
async def update_contact(
    client_id: int,
    contact_id: int,
    data: ContactUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.UPDATE))
):
    """Update a contact."""
    return ok(client_service.update_contact(db, client_id, contact_id, data), "Contact updated successfully")


@router.post("/{client_id}/contacts/{contact_id}/primary", response_model=ApiResponse[ContactResponse])
async def set_primary_contact(
    client_id: int,
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.UPDATE))
):
    """Make this the client's only primary contact."""
    return ok(client_service.set_primary_contact(db, client_id, contact_id), "Primary contact updated")


@router.delete("/{client_id}/contacts/{contact_id}", response_model=MessageResponse)
async def delete_contact(
    client_id: int,
    contact_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.DELETE))
):
    """Soft-delete a contact."""
    client_service.delete_contact(db, client_id, contact_id)
    return ok(None, "Contact deleted successfully")


# Projects

@router.get("/{client_id}/projects", response_model=ApiResponse[ClientProjectsResponse])
async def get_client_projects(
    client_id: int,
    status: Optional[ProjectStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.CLIENTS, Action.READ))
):
    """A client's projects with status statistics."""
    return ok(client_service.get_client_projects(db, client_id, status.value if status else None))
