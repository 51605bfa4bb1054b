"""Quotation routes: items, attached terms, document links and conversion."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_owned, get_current_user
from backend.app.models.quotation import Quotation
from backend.app.models.user import User
from backend.app.schemas.document import DocumentRead
from backend.app.schemas.invoice import InvoiceDetail
from backend.app.schemas.quotation import (
    QuotationCreate,
    QuotationDetail,
    QuotationDocumentRead,
    QuotationItemCreate,
    QuotationItemRead,
    QuotationItemUpdate,
    QuotationRead,
    QuotationStatus,
    QuotationTermCreate,
    QuotationTermRead,
    QuotationTermUpdate,
    QuotationUpdate,
)
from backend.app.services import quotations as service

router = APIRouter(prefix="/quotations", tags=["quotations"])


def _get_owned_quotation(db: Session, quotation_id: int, current_user: User) -> Quotation:
    return ensure_owned(service.get_quotation(db, quotation_id), current_user, "Quotation")


def _ensure_child(rows, child_id: int, label: str) -> None:
    if not any(row.id == child_id for row in rows):
        raise NotFoundError(f"{label} not found")


@router.get("/", response_model=List[QuotationRead])
def list_quotations(
    status: QuotationStatus | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_quotations(db, current_user.id, status)


@router.post("/", response_model=QuotationDetail, status_code=status.HTTP_201_CREATED)
def create_quotation(
    quotation_in: QuotationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_quotation(db, current_user.id, quotation_in)


@router.get("/{quotation_id}", response_model=QuotationDetail)
def get_quotation(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_quotation(db, quotation_id, current_user)


@router.patch("/{quotation_id}", response_model=QuotationDetail)
def update_quotation(
    quotation_id: int,
    quotation_in: QuotationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.update_quotation(db, quotation_id, quotation_in)


@router.delete("/{quotation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quotation(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _get_owned_quotation(db, quotation_id, current_user)
    service.delete_quotation(db, quotation_id)


@router.post("/{quotation_id}/convert", response_model=InvoiceDetail, status_code=status.HTTP_201_CREATED)
def convert_to_invoice(
    quotation_id: int,
    invoice_number: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.convert_quotation_to_invoice(db, current_user.id, quotation_id, invoice_number=invoice_number)


# Items

@router.get("/{quotation_id}/items", response_model=List[QuotationItemRead])
def list_quotation_items(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.get_quotation_items(db, quotation_id)


@router.post("/{quotation_id}/items", response_model=QuotationItemRead, status_code=status.HTTP_201_CREATED)
def add_quotation_item(
    quotation_id: int,
    item_in: QuotationItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.create_quotation_item(db, quotation_id, item_in)


@router.patch("/{quotation_id}/items/{item_id}", response_model=QuotationItemRead)
def update_quotation_item(
    quotation_id: int,
    item_id: int,
    item_in: QuotationItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation = _get_owned_quotation(db, quotation_id, current_user)
    _ensure_child(quotation.items, item_id, "Quotation item")
    return service.update_quotation_item(db, item_id, item_in)


@router.delete("/{quotation_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quotation_item(
    quotation_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation = _get_owned_quotation(db, quotation_id, current_user)
    _ensure_child(quotation.items, item_id, "Quotation item")
    service.delete_quotation_item(db, item_id)


# Terms

@router.get("/{quotation_id}/terms", response_model=List[QuotationTermRead])
def list_quotation_terms(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.get_quotation_terms(db, quotation_id)


@router.post("/{quotation_id}/terms", response_model=QuotationTermRead, status_code=status.HTTP_201_CREATED)
def add_quotation_term(
    quotation_id: int,
    term_in: QuotationTermCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.add_quotation_term(db, quotation_id, term_in)


@router.patch("/{quotation_id}/terms/{term_id}", response_model=QuotationTermRead)
def update_quotation_term(
    quotation_id: int,
    term_id: int,
    term_in: QuotationTermUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation = _get_owned_quotation(db, quotation_id, current_user)
    _ensure_child(quotation.quotation_terms, term_id, "Quotation term")
    return service.update_quotation_term(db, term_id, term_in)


@router.delete("/{quotation_id}/terms/{term_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_quotation_term(
    quotation_id: int,
    term_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotation = _get_owned_quotation(db, quotation_id, current_user)
    _ensure_child(quotation.quotation_terms, term_id, "Quotation term")
    service.remove_quotation_term(db, term_id)


# Documents

@router.get("/{quotation_id}/documents", response_model=List[DocumentRead])
def list_quotation_documents(quotation_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.get_quotation_documents(db, quotation_id)


@router.post(
    "/{quotation_id}/documents/{document_id}",
    response_model=QuotationDocumentRead,
    status_code=status.HTTP_201_CREATED,
)
def attach_document(
    quotation_id: int,
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_quotation(db, quotation_id, current_user)
    return service.link_document(db, quotation_id, document_id)


@router.delete("/{quotation_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def detach_document(
    quotation_id: int,
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_quotation(db, quotation_id, current_user)
    service.unlink_document(db, quotation_id, document_id)
