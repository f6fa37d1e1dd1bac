from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from electrical_pm.core.exceptions import NotFoundError
from electrical_pm.models.client import Client, ClientContact
from electrical_pm.models.project import Project
from electrical_pm.schemas.client import ClientCreate, ClientUpdate, ContactCreate, ContactUpdate
import logging

logger = logging.getLogger(__name__)


class ClientService:
    """Clients, their contacts and the projects run for them."""

    def get_client(self, db: Session, client_id: int) -> Client:
        client = db.query(Client).filter(
            Client.id == client_id,
            Client.deleted_at.is_(None)
        ).first()
        if not client:
            raise NotFoundError("Client not found")
        return client

    def list_clients(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        search: Optional[str] = None,
        client_type: Optional[str] = None
    ) -> Tuple[List[Client], int]:
        query = db.query(Client).filter(Client.deleted_at.is_(None))

        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                Client.name.ilike(pattern),
                Client.email.ilike(pattern),
                Client.phone.ilike(pattern)
            ))
        if client_type:
            query = query.filter(Client.type == client_type)

        total = query.count()
        clients = query.order_by(Client.name.asc()).offset(offset).limit(limit).all()
        return clients, total

    def create_client(self, db: Session, data: ClientCreate, actor_id: int) -> Client:
        client = Client(**data.model_dump(), created_by=actor_id, updated_by=actor_id)
        db.add(client)
        db.commit()
        db.refresh(client)

        logger.info(f"Client {client.id} ({client.name}) created by user {actor_id}")
        return client

    def update_client(self, db: Session, client_id: int, data: ClientUpdate, actor_id: int) -> Client:
        client = self.get_client(db, client_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(client, field, value)
        client.updated_by = actor_id

        db.commit()
        db.refresh(client)
        return client

    def delete_client(self, db: Session, client_id: int, actor_id: int) -> None:
        client = self.get_client(db, client_id)
        client.deleted_at = datetime.utcnow()
        client.updated_by = actor_id
        db.commit()

        logger.info(f"Client {client_id} deleted by user {actor_id}")

    # Contacts

    def list_contacts(self, db: Session, client_id: int) -> List[ClientContact]:
        self.get_client(db, client_id)
        return db.query(ClientContact).filter(
            ClientContact.client_id == client_id,
            ClientContact.deleted_at.is_(None)
        ).order_by(ClientContact.is_primary.desc(), ClientContact.name.asc()).all()

    def get_contact(self, db: Session, client_id: int, contact_id: int) -> ClientContact:
        contact = db.query(ClientContact).filter(
            ClientContact.id == contact_id,
            ClientContact.client_id == client_id,
            ClientContact.deleted_at.is_(None)
        ).first()
        if not contact:
            raise NotFoundError("Contact not found")
        return contact

    def _clear_primary(self, db: Session, client_id: int, keep_id: Optional[int] = None):
        query = db.query(ClientContact).filter(
            ClientContact.client_id == client_id,
            ClientContact.is_primary.is_(True)
        )
        if keep_id:
            query = query.filter(ClientContact.id != keep_id)
        query.update({ClientContact.is_primary: False}, synchronize_session=False)

    def create_contact(self, db: Session, client_id: int, data: ContactCreate) -> ClientContact:
        self.get_client(db, client_id)
        try:
            if data.is_primary:
                self._clear_primary(db, client_id)
            contact = ClientContact(client_id=client_id, **data.model_dump())
            db.add(contact)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(contact)
        return contact

    def update_contact(self, db: Session, client_id: int, contact_id: int, data: ContactUpdate) -> ClientContact:
        contact = self.get_contact(db, client_id, contact_id)
        update_data = data.model_dump(exclude_unset=True)
        try:
            if update_data.get("is_primary"):
                self._clear_primary(db, client_id, keep_id=contact.id)
            for field, value in update_data.items():
                setattr(contact, field, value)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(contact)
        return contact

    def set_primary_contact(self, db: Session, client_id: int, contact_id: int) -> ClientContact:
        return self.update_contact(db, client_id, contact_id, ContactUpdate(is_primary=True))

    def delete_contact(self, db: Session, client_id: int, contact_id: int) -> None:
        contact = self.get_contact(db, client_id, contact_id)
        contact.deleted_at = datetime.utcnow()
        contact.is_primary = False
        db.commit()

    # Projects

    def get_client_projects(self, db: Session, client_id: int, status: Optional[str] = None) -> Dict:
        client = self.get_client(db, client_id)
        query = db.query(Project).filter(
            Project.client_id == client_id,
            Project.deleted_at.is_(None)
        )
        all_projects = query.order_by(Project.created_at.desc()).all()

        by_status: Dict[str, int] = {}
        for project in all_projects:
            by_status[project.status] = by_status.get(project.status, 0) + 1

        projects = [p for p in all_projects if not status or p.status == status]
        return {
            "client": client,
            "projects": projects,
            "statistics": {
                "total": len(all_projects),
                "by_status": by_status,
                "total_budget": round(sum(p.budget or 0 for p in all_projects), 2),
            },
        }


# Singleton instance
client_service = ClientService()
