"""Client routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_owned, get_current_user
from backend.app.models.user import User
from backend.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from backend.app.services import clients as service
from backend.app.services.integrity import delete_client

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=List[ClientRead])
def list_clients(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.get_clients(db, current_user.id)


@router.get("/central", response_model=List[ClientRead])
def list_central_repo_clients(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.get_central_repo_clients(db)


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def create_client(client_in: ClientCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.create_client(db, current_user.id, client_in)


@router.get("/{client_id}", response_model=ClientRead)
def get_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return ensure_owned(service.get_client(db, client_id), current_user, "Client")


@router.patch("/{client_id}", response_model=ClientRead)
def update_client(
    client_id: int,
    client_in: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owned(service.get_client(db, client_id), current_user, "Client")
    return service.update_client(db, client_id, client_in)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owned(service.get_client(db, client_id), current_user, "Client")
    delete_client(db, client_id)
