"""Client store operations. Deletes go through the integrity guard."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ValidationError
from backend.app.db.unit_of_work import lock_row, unit_of_work
from backend.app.models.client import Client
from backend.app.schemas.client import ClientCreate, ClientUpdate


def get_clients(db: Session, user_id: int) -> List[Client]:
    return db.query(Client).filter(Client.user_id == user_id).order_by(Client.name.asc(), Client.id.asc()).all()


def get_client(db: Session, client_id: int) -> Optional[Client]:
    return db.get(Client, client_id)


def get_central_repo_clients(db: Session) -> List[Client]:
    return db.query(Client).filter(Client.is_from_central_repo.is_(True)).order_by(Client.name.asc()).all()


def create_client(db: Session, user_id: int, client_in: ClientCreate) -> Client:
    if not client_in.name:
        raise ValidationError("name is required")
    with unit_of_work(db):
        client = Client(user_id=user_id, is_from_central_repo=False, **client_in.model_dump())
        db.add(client)
        db.flush()
    db.refresh(client)
    return client


def update_client(db: Session, client_id: int, client_in: ClientUpdate) -> Client:
    with unit_of_work(db):
        client = lock_row(db, Client, client_id, "Client")
        if client.is_from_central_repo:
            raise ValidationError("Clients from the central repository are read-only")
        changes = client_in.model_dump(exclude_unset=True)
        if "name" in changes and not changes["name"]:
            raise ValidationError("name is required")
        for field, value in changes.items():
            setattr(client, field, value)
        db.flush()
    db.refresh(client)
    return client
