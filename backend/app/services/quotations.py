"""Quotation, quotation item/term and document-link store operations.

Quotations follow the same derived-totals rules as invoices. Creation is
metered against the quote quota; items and terms copied from the master
catalog are metered as material usage.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ValidationError
from backend.app.core.time import utc_now
from backend.app.db.unit_of_work import get_or_raise, lock_row, unit_of_work
from backend.app.models.company_item import CompanyItem
from backend.app.models.company_term import CompanyTerm
from backend.app.models.document import Document
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.master_term import MasterTerm
from backend.app.models.quotation import Quotation
from backend.app.models.quotation_document import QuotationDocument
from backend.app.models.quotation_item import QuotationItem
from backend.app.models.quotation_term import QuotationTerm
from backend.app.schemas.quotation import (
    QuotationCreate,
    QuotationItemCreate,
    QuotationItemUpdate,
    QuotationTermCreate,
    QuotationTermUpdate,
    QuotationUpdate,
)
from backend.app.services import usage
from backend.app.services.invoices import AMOUNT_FIELDS, TOTALS_FIELDS, validate_document_discount, validate_document_references
from backend.app.services.totals import compute_item_amount, normalize_line, recalculate_document_totals

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("company_profile_id", "client_id", "quote_number", "quote_date", "country", "currency", "status")


def get_quotations(db: Session, user_id: int, status: Optional[str] = None) -> List[Quotation]:
    query = db.query(Quotation).filter(Quotation.user_id == user_id)
    if status:
        query = query.filter(Quotation.status == status)
    return query.order_by(Quotation.created_at.desc(), Quotation.id.desc()).all()


def get_quotation(db: Session, quotation_id: int) -> Optional[Quotation]:
    return db.get(Quotation, quotation_id)


def create_quotation(db: Session, user_id: int, quotation_in: QuotationCreate, now: Optional[datetime] = None) -> Quotation:
    with unit_of_work(db):
        usage.lock_user(db, user_id)
        usage.ensure_quote_quota(db, user_id, now)
        validate_document_references(db, user_id, quotation_in.company_profile_id, quotation_in.client_id)

        data = quotation_in.model_dump()
        data["discount"] = validate_document_discount(data["discount"])
        data["quote_date"] = data["quote_date"] or utc_now()
        quotation = Quotation(user_id=user_id, **data)
        db.add(quotation)
        db.flush()
        recalculate_document_totals(db, quotation)

        usage.increment_quote_usage(db, user_id)
        logger.info("Created quotation %s for user %s", quotation.id, user_id)
    db.refresh(quotation)
    return quotation


def update_quotation(db: Session, quotation_id: int, quotation_in: QuotationUpdate) -> Quotation:
    with unit_of_work(db):
        quotation = lock_row(db, Quotation, quotation_id, "Quotation")
        changes = quotation_in.model_dump(exclude_unset=True)
        for required in REQUIRED_FIELDS:
            if required in changes and changes[required] is None:
                raise ValidationError(f"{required} cannot be cleared")
        validate_document_references(db, quotation.user_id, changes.get("company_profile_id"), changes.get("client_id"))
        if "discount" in changes:
            changes["discount"] = validate_document_discount(changes["discount"])

        for field, value in changes.items():
            setattr(quotation, field, value)
        quotation.updated_at = utc_now()
        if any(field in changes for field in TOTALS_FIELDS):
            recalculate_document_totals(db, quotation)
        db.flush()
    db.refresh(quotation)
    return quotation


def delete_quotation(db: Session, quotation_id: int) -> None:
    """Delete a quotation with its items, terms and document links.

    Invoices converted from it keep their data; their link is cleared.
    """
    with unit_of_work(db):
        quotation = lock_row(db, Quotation, quotation_id, "Quotation")
        item_ids = [item.id for item in quotation.items]
        if item_ids:
            db.query(InvoiceItem).filter(InvoiceItem.quotation_item_id.in_(item_ids)).update(
                {InvoiceItem.quotation_item_id: None}, synchronize_session=False
            )
        db.query(Invoice).filter(Invoice.quotation_id == quotation_id).update(
            {Invoice.quotation_id: None}, synchronize_session=False
        )
        db.delete(quotation)
        db.flush()


# Items

def get_quotation_items(db: Session, quotation_id: int) -> List[QuotationItem]:
    return db.query(QuotationItem).filter(QuotationItem.quotation_id == quotation_id).order_by(QuotationItem.id.asc()).all()


def create_quotation_item(db: Session, quotation_id: int, item_in: QuotationItemCreate) -> QuotationItem:
    with unit_of_work(db):
        quotation = lock_row(db, Quotation, quotation_id, "Quotation")
        if not item_in.description:
            raise ValidationError("description is required")
        if item_in.company_item_id is not None:
            company_item = db.get(CompanyItem, item_in.company_item_id)
            if company_item is None or company_item.user_id != quotation.user_id:
                raise ValidationError("Invalid company item")
        line = normalize_line(item_in.quantity, item_in.unit_price, item_in.discount)
        if item_in.master_item_id is not None:
            usage.track_material_usage(db, quotation.user_id, item_in.master_item_id, quotation_id=quotation.id)
        item = QuotationItem(quotation_id=quotation.id, **{**item_in.model_dump(), **line})
        item.apply_amount(compute_item_amount(**line))
        db.add(item)
        recalculate_document_totals(db, quotation)
    db.refresh(item)
    return item


def update_quotation_item(db: Session, item_id: int, item_in: QuotationItemUpdate) -> QuotationItem:
    with unit_of_work(db):
        item = get_or_raise(db, QuotationItem, item_id, "Quotation item")
        quotation = lock_row(db, Quotation, item.quotation_id, "Quotation")
        item = lock_row(db, QuotationItem, item_id, "Quotation item")

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
            recalculate_document_totals(db, quotation)
        db.flush()
    db.refresh(item)
    return item


def delete_quotation_item(db: Session, item_id: int) -> None:
    with unit_of_work(db):
        item = get_or_raise(db, QuotationItem, item_id, "Quotation item")
        quotation = lock_row(db, Quotation, item.quotation_id, "Quotation")
        db.query(InvoiceItem).filter(InvoiceItem.quotation_item_id == item_id).update(
            {InvoiceItem.quotation_item_id: None}, synchronize_session=False
        )
        db.delete(item)
        recalculate_document_totals(db, quotation)


# Terms

def get_quotation_terms(db: Session, quotation_id: int) -> List[QuotationTerm]:
    return (
        db.query(QuotationTerm)
        .filter(QuotationTerm.quotation_id == quotation_id)
        .order_by(QuotationTerm.sort_order.asc(), QuotationTerm.id.asc())
        .all()
    )


def add_quotation_term(db: Session, quotation_id: int, term_in: QuotationTermCreate) -> QuotationTerm:
    """Attach a term; one taken from the master catalog bumps the material counter."""
    if not (term_in.category and term_in.title and term_in.content):
        raise ValidationError("category, title and content are required")
    with unit_of_work(db):
        quotation = lock_row(db, Quotation, quotation_id, "Quotation")
        if term_in.master_term_id is not None:
            get_or_raise(db, MasterTerm, term_in.master_term_id, "Master term")
        if term_in.company_term_id is not None:
            company_term = db.get(CompanyTerm, term_in.company_term_id)
            if company_term is None or company_term.user_id != quotation.user_id:
                raise ValidationError("Invalid company term")
        term = QuotationTerm(quotation_id=quotation.id, **term_in.model_dump())
        db.add(term)
        db.flush()
        if term_in.master_term_id is not None:
            usage.increment_material_usage(db, quotation.user_id)
    db.refresh(term)
    return term


def update_quotation_term(db: Session, term_id: int, term_in: QuotationTermUpdate) -> QuotationTerm:
    changes = term_in.model_dump(exclude_unset=True)
    for field in ("category", "title", "content", "sort_order"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be cleared")
    with unit_of_work(db):
        term = lock_row(db, QuotationTerm, term_id, "Quotation term")
        for field, value in changes.items():
            setattr(term, field, value)
        db.flush()
    db.refresh(term)
    return term


def remove_quotation_term(db: Session, term_id: int) -> None:
    with unit_of_work(db):
        term = lock_row(db, QuotationTerm, term_id, "Quotation term")
        db.delete(term)
        db.flush()


# Document links

def get_quotation_documents(db: Session, quotation_id: int) -> List[Document]:
    return (
        db.query(Document)
        .join(QuotationDocument, QuotationDocument.document_id == Document.id)
        .filter(QuotationDocument.quotation_id == quotation_id)
        .order_by(Document.created_at.asc(), Document.id.asc())
        .all()
    )


def link_document(db: Session, quotation_id: int, document_id: int) -> QuotationDocument:
    with unit_of_work(db):
        quotation = lock_row(db, Quotation, quotation_id, "Quotation")
        document = get_or_raise(db, Document, document_id, "Document")
        if document.user_id != quotation.user_id:
            raise ValidationError("Invalid document")
        existing = (
            db.query(QuotationDocument)
            .filter(QuotationDocument.quotation_id == quotation_id, QuotationDocument.document_id == document_id)
            .first()
        )
        if existing is not None:
            return existing
        link = QuotationDocument(quotation_id=quotation_id, document_id=document_id)
        db.add(link)
        db.flush()
        return link


def unlink_document(db: Session, quotation_id: int, document_id: int) -> None:
    with unit_of_work(db):
        lock_row(db, Quotation, quotation_id, "Quotation")
        deleted = (
            db.query(QuotationDocument)
            .filter(QuotationDocument.quotation_id == quotation_id, QuotationDocument.document_id == document_id)
            .delete(synchronize_session=False)
        )
        if not deleted:
            raise ValidationError("Document is not attached to this quotation")


# Conversion

def convert_quotation_to_invoice(
    db: Session,
    user_id: int,
    quotation_id: int,
    invoice_number: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Invoice:
    """Create an invoice from a quotation and mark the quotation accepted.

    The new invoice is metered like any other, and its items go through the
    same amount calculation as manually entered ones.
    """
    with unit_of_work(db):
        usage.lock_user(db, user_id)
        quotation = lock_row(db, Quotation, quotation_id, "Quotation")
        if quotation.user_id != user_id:
            raise ValidationError("Invalid quotation")
        usage.ensure_invoice_quota(db, user_id, now)

        invoice = Invoice(
            user_id=user_id,
            company_profile_id=quotation.company_profile_id,
            client_id=quotation.client_id,
            quotation_id=quotation.id,
            invoice_number=invoice_number or f"INV-{quotation.quote_number}",
            invoice_date=now or utc_now(),
            country=quotation.country,
            currency=quotation.currency,
            template_id=quotation.template_id,
            discount=quotation.discount,
            notes=quotation.notes,
            terms=quotation.terms,
            status="draft",
        )
        db.add(invoice)
        db.flush()
        for source in quotation.items:
            item = InvoiceItem(
                invoice_id=invoice.id,
                quotation_item_id=source.id,
                description=source.description,
                quantity=source.quantity,
                unit_price=source.unit_price,
                discount=source.discount,
            )
            item.apply_amount(compute_item_amount(source.quantity, source.unit_price, source.discount))
            db.add(item)
        recalculate_document_totals(db, invoice)

        quotation.status = "accepted"
        quotation.updated_at = utc_now()
        usage.increment_invoice_usage(db, user_id)
        logger.info("Converted quotation %s into invoice %s", quotation.id, invoice.id)
    db.refresh(invoice)
    return invoice
