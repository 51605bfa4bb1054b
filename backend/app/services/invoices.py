"""Invoice and invoice item store operations.

Every item mutation recomputes the parent invoice's totals in the same unit of
work, holding the invoice row lock, so concurrent edits of one invoice cannot
overwrite each other's totals. Invoice creation is metered by the usage ledger.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ValidationError
from backend.app.core.time import utc_now
from backend.app.db.unit_of_work import get_or_raise, lock_row, unit_of_work
from backend.app.models.client import Client
from backend.app.models.company_profile import CompanyProfile
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.quotation_item import QuotationItem
from backend.app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from backend.app.schemas.invoice_item import InvoiceItemCreate, InvoiceItemUpdate
from backend.app.services import usage
from backend.app.services.totals import compute_item_amount, normalize_line, recalculate_document_totals, round2, to_decimal

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("quantity", "unit_price", "discount")
TOTALS_FIELDS = ("discount", "country")


def validate_document_references(db: Session, user_id: int, company_profile_id: Optional[int], client_id: Optional[int]) -> None:
    """Tenant check for the profile and client a document points at."""
    if company_profile_id is not None:
        profile = db.get(CompanyProfile, company_profile_id)
        if profile is None or profile.user_id != user_id:
            raise ValidationError("Invalid company profile")
    if client_id is not None:
        client = db.get(Client, client_id)
        if client is None or (client.user_id != user_id and not client.is_from_central_repo):
            raise ValidationError("Invalid client")


def validate_document_discount(value) -> Decimal:
    discount = round2(to_decimal(value, "discount"))
    if discount < 0:
        raise ValidationError("discount must not be negative")
    return discount


def get_invoices(db: Session, user_id: int, status: Optional[str] = None) -> List[Invoice]:
    query = db.query(Invoice).filter(Invoice.user_id == user_id)
    if status:
        query = query.filter(Invoice.status == status)
    return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()


def get_invoice(db: Session, invoice_id: int) -> Optional[Invoice]:
    return db.get(Invoice, invoice_id)


def create_invoice(db: Session, user_id: int, invoice_in: InvoiceCreate, now: Optional[datetime] = None) -> Invoice:
    """Quota check, insert, then usage increment, as one unit of work."""
    with unit_of_work(db):
        usage.lock_user(db, user_id)
        usage.ensure_invoice_quota(db, user_id, now)
        validate_document_references(db, user_id, invoice_in.company_profile_id, invoice_in.client_id)

        data = invoice_in.model_dump()
        data["discount"] = validate_document_discount(data["discount"])
        data["invoice_date"] = data["invoice_date"] or utc_now()
        invoice = Invoice(user_id=user_id, **data)
        db.add(invoice)
        db.flush()
        recalculate_document_totals(db, invoice)

        usage.increment_invoice_usage(db, user_id)
        logger.info("Created invoice %s for user %s", invoice.id, user_id)
    db.refresh(invoice)
    return invoice


def update_invoice(db: Session, invoice_id: int, invoice_in: InvoiceUpdate) -> Invoice:
    with unit_of_work(db):
        invoice = lock_row(db, Invoice, invoice_id, "Invoice")
        changes = invoice_in.model_dump(exclude_unset=True)
        for required in ("company_profile_id", "client_id", "invoice_number", "invoice_date", "country", "currency", "status"):
            if required in changes and changes[required] is None:
                raise ValidationError(f"{required} cannot be cleared")
        validate_document_references(db, invoice.user_id, changes.get("company_profile_id"), changes.get("client_id"))
        if "discount" in changes:
            changes["discount"] = validate_document_discount(changes["discount"])

        for field, value in changes.items():
            setattr(invoice, field, value)
        invoice.updated_at = utc_now()
        if any(field in changes for field in TOTALS_FIELDS):
            recalculate_document_totals(db, invoice)
        db.flush()
    db.refresh(invoice)
    return invoice


def delete_invoice(db: Session, invoice_id: int) -> None:
    """Delete an invoice and its items. Consumed quota is not refunded."""
    with unit_of_work(db):
        invoice = lock_row(db, Invoice, invoice_id, "Invoice")
        db.delete(invoice)
        db.flush()


def get_invoice_items(db: Session, invoice_id: int) -> List[InvoiceItem]:
    return db.query(InvoiceItem).filter(InvoiceItem.invoice_id == invoice_id).order_by(InvoiceItem.id.asc()).all()


def create_invoice_item(db: Session, invoice_id: int, item_in: InvoiceItemCreate) -> InvoiceItem:
    with unit_of_work(db):
        invoice = lock_row(db, Invoice, invoice_id, "Invoice")
        if not item_in.description:
            raise ValidationError("description is required")
        if item_in.quotation_item_id is not None:
            source = db.get(QuotationItem, item_in.quotation_item_id)
            if source is None or source.quotation.user_id != invoice.user_id:
                raise ValidationError("Invalid quotation item")
        line = normalize_line(item_in.quantity, item_in.unit_price, item_in.discount)
        item = InvoiceItem(invoice_id=invoice.id, **{**item_in.model_dump(), **line})
        item.apply_amount(compute_item_amount(**line))
        db.add(item)
        recalculate_document_totals(db, invoice)
    db.refresh(item)
    return item


def update_invoice_item(db: Session, item_id: int, item_in: InvoiceItemUpdate) -> InvoiceItem:
    with unit_of_work(db):
        item = get_or_raise(db, InvoiceItem, item_id, "Invoice item")
        invoice = lock_row(db, Invoice, item.invoice_id, "Invoice")
        item = lock_row(db, InvoiceItem, item_id, "Invoice item")

        changes = item_in.model_dump(exclude_unset=True)
        if "description" in changes and not changes["description"]:
            raise ValidationError("description is required")
        amount_changed = any(field in changes for field in AMOUNT_FIELDS)
        if amount_changed:
            if changes.get("discount", 0) is None:
                changes["discount"] = Decimal("0")
            line = normalize_line(*(changes.get(field, getattr(item, field)) for field in AMOUNT_FIELDS))
            changes.update(line)
            item.apply_amount(compute_item_amount(**line))

        for field, value in changes.items():
            setattr(item, field, value)
        if amount_changed:
            recalculate_document_totals(db, invoice)
        db.flush()
    db.refresh(item)
    return item


def delete_invoice_item(db: Session, item_id: int) -> None:
    with unit_of_work(db):
        item = get_or_raise(db, InvoiceItem, item_id, "Invoice item")
        invoice = lock_row(db, Invoice, item.invoice_id, "Invoice")
        db.delete(item)
        recalculate_document_totals(db, invoice)


def import_invoice_items(db: Session, invoice_id: int, rows: Iterable[InvoiceItemCreate]) -> List[InvoiceItem]:
    """Feed spreadsheet rows through the manual-entry path; all or nothing."""
    with unit_of_work(db):
        created = [create_invoice_item(db, invoice_id, row) for row in rows]
    for item in created:
        db.refresh(item)
    return created
