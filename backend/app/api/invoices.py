"""Invoice and invoice item routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_owned, get_current_user
from backend.app.models.invoice import Invoice
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceCreate, InvoiceDetail, InvoiceRead, InvoiceStatus, InvoiceUpdate
from backend.app.schemas.invoice_item import InvoiceItemCreate, InvoiceItemRead, InvoiceItemUpdate
from backend.app.services import invoices as service

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _get_owned_invoice(db: Session, invoice_id: int, current_user: User) -> Invoice:
    return ensure_owned(service.get_invoice(db, invoice_id), current_user, "Invoice")


def _get_owned_item(db: Session, invoice_id: int, item_id: int, current_user: User):
    invoice = _get_owned_invoice(db, invoice_id, current_user)
    for item in invoice.items:
        if item.id == item_id:
            return item
    raise NotFoundError("Invoice item not found")


@router.get("/", response_model=List[InvoiceRead])
def list_invoices(
    status: InvoiceStatus | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_invoices(db, current_user.id, status)


@router.post("/", response_model=InvoiceDetail, status_code=status.HTTP_201_CREATED)
def create_invoice(invoice_in: InvoiceCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.create_invoice(db, current_user.id, invoice_in)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_invoice(db, invoice_id, current_user)


@router.patch("/{invoice_id}", response_model=InvoiceDetail)
def update_invoice(
    invoice_id: int,
    invoice_in: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_invoice(db, invoice_id, current_user)
    return service.update_invoice(db, invoice_id, invoice_in)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _get_owned_invoice(db, invoice_id, current_user)
    service.delete_invoice(db, invoice_id)


@router.get("/{invoice_id}/items", response_model=List[InvoiceItemRead])
def list_invoice_items(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _get_owned_invoice(db, invoice_id, current_user)
    return service.get_invoice_items(db, invoice_id)


@router.post("/{invoice_id}/items", response_model=InvoiceItemRead, status_code=status.HTTP_201_CREATED)
def add_invoice_item(
    invoice_id: int,
    item_in: InvoiceItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_invoice(db, invoice_id, current_user)
    return service.create_invoice_item(db, invoice_id, item_in)


@router.post("/{invoice_id}/items/import", response_model=List[InvoiceItemRead], status_code=status.HTTP_201_CREATED)
def import_invoice_items(
    invoice_id: int,
    rows: List[InvoiceItemCreate],
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_invoice(db, invoice_id, current_user)
    return service.import_invoice_items(db, invoice_id, rows)


@router.patch("/{invoice_id}/items/{item_id}", response_model=InvoiceItemRead)
def update_invoice_item(
    invoice_id: int,
    item_id: int,
    item_in: InvoiceItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_item(db, invoice_id, item_id, current_user)
    return service.update_invoice_item(db, item_id, item_in)


@router.delete("/{invoice_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice_item(
    invoice_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    _get_owned_item(db, invoice_id, item_id, current_user)
    service.delete_invoice_item(db, item_id)
