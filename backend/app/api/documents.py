"""Document routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_owned, get_current_user
from backend.app.models.user import User
from backend.app.schemas.document import DocumentCreate, DocumentRead
from backend.app.services import documents as service

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("/", response_model=List[DocumentRead])
def list_documents(
    type: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_documents(db, current_user.id, type)


@router.post("/", response_model=DocumentRead, status_code=status.HTTP_201_CREATED)
def create_document(document_in: DocumentCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.create_document(db, current_user.id, document_in)


@router.get("/{document_id}", response_model=DocumentRead)
def get_document(document_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return ensure_owned(service.get_document(db, document_id), current_user, "Document")


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(document_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owned(service.get_document(db, document_id), current_user, "Document")
    service.delete_document(db, document_id)
