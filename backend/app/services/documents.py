"""Uploaded documents owned by a user."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ValidationError
from backend.app.db.unit_of_work import lock_row, unit_of_work
from backend.app.models.document import Document
from backend.app.models.quotation_document import QuotationDocument
from backend.app.schemas.document import DocumentCreate


def get_documents(db: Session, user_id: int, type: Optional[str] = None) -> List[Document]:
    query = db.query(Document).filter(Document.user_id == user_id)
    if type:
        query = query.filter(Document.type == type)
    return query.order_by(Document.created_at.desc(), Document.id.desc()).all()


def get_document(db: Session, document_id: int) -> Optional[Document]:
    return db.get(Document, document_id)


def create_document(db: Session, user_id: int, document_in: DocumentCreate) -> Document:
    if not (document_in.name and document_in.type and document_in.file_url):
        raise ValidationError("name, type and file_url are required")
    if document_in.file_size is not None and document_in.file_size < 0:
        raise ValidationError("file_size must not be negative")
    with unit_of_work(db):
        document = Document(user_id=user_id, **document_in.model_dump())
        db.add(document)
        db.flush()
    db.refresh(document)
    return document


def delete_document(db: Session, document_id: int) -> None:
    """Delete a document and detach it from every quotation."""
    with unit_of_work(db):
        document = lock_row(db, Document, document_id, "Document")
        db.query(QuotationDocument).filter(QuotationDocument.document_id == document_id).delete(
            synchronize_session=False
        )
        db.delete(document)
        db.flush()
