"""Total calculator for invoices and quotations.

Line amounts and document totals are derived fields: this module is the only
producer of the ``LineAmount`` / ``DocumentTotals`` values the models accept.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Union

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConsistencyError, NotFoundError, ValidationError
from backend.app.db.unit_of_work import lock_row, unit_of_work
from backend.app.models.derived import ZERO, DocumentTotals, LineAmount
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.quotation import Quotation
from backend.app.models.quotation_item import QuotationItem
from backend.app.models.tax_rate import TaxRate

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")

Number = Union[Decimal, int, float, str]
BillingDocument = Union[Invoice, Quotation]


def to_decimal(value: Number | None, field: str = "value") -> Decimal:
    if value is None:
        raise ValidationError(f"{field} is required")
    try:
        return Decimal(str(value))
    except ArithmeticError as exc:
        raise ValidationError(f"{field} must be a number") from exc


def round2(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def normalize_line(quantity: Number, unit_price: Number, discount: Number | None = 0) -> dict:
    """Validate line inputs and round them to the two places the columns store.

    Raises ValidationError for a discount outside [0, 100] or a negative
    quantity or unit price.
    """
    qty = round2(to_decimal(quantity, "quantity"))
    price = round2(to_decimal(unit_price, "unit_price"))
    discount = round2(to_decimal(discount if discount is not None else 0, "discount"))
    if qty < 0:
        raise ValidationError("quantity must not be negative")
    if price < 0:
        raise ValidationError("unit_price must not be negative")
    if discount < 0 or discount > HUNDRED:
        raise ValidationError("discount must be between 0 and 100")
    return {"quantity": qty, "unit_price": price, "discount": discount}


def compute_item_amount(quantity: Number, unit_price: Number, discount: Number | None = 0) -> LineAmount:
    """Return ``quantity * unit_price * (1 - discount/100)`` rounded half-up to cents.

    Inputs are taken at their stored scale, so the amount can always be
    reproduced from the persisted line.
    """
    line = normalize_line(quantity, unit_price, discount)
    return LineAmount(round2(line["quantity"] * line["unit_price"] * (1 - line["discount"] / HUNDRED)))


def compute_document_totals(amounts: Iterable[Decimal], document_discount: Number | None, tax_rate: Number | None) -> DocumentTotals:
    """Aggregate stored line amounts into subtotal, tax and total.

    ``document_discount`` is an absolute currency amount taken off the subtotal
    before tax; ``tax_rate`` is a percentage.
    """
    subtotal = round2(sum((Decimal(a) for a in amounts), ZERO))
    discount = round2(to_decimal(document_discount if document_discount is not None else 0, "discount"))
    rate = to_decimal(tax_rate if tax_rate is not None else 0, "tax_rate")
    discounted = subtotal - discount
    tax = round2(discounted * rate / HUNDRED)
    return DocumentTotals(subtotal=subtotal, tax=tax, total=round2(discounted + tax), tax_rate=round2(rate))


def resolve_tax_rate(db: Session, country_code: str | None) -> Decimal:
    """Default tax rate for a country code, or 0 when none is configured."""
    if not country_code:
        return ZERO
    rate = (
        db.query(TaxRate)
        .filter(TaxRate.country_code == country_code.upper(), TaxRate.is_default.is_(True))
        .order_by(TaxRate.id.asc())
        .first()
    )
    return Decimal(str(rate.rate)) if rate else ZERO


def _item_model(document: BillingDocument):
    if isinstance(document, Invoice):
        return InvoiceItem, InvoiceItem.invoice_id
    if isinstance(document, Quotation):
        return QuotationItem, QuotationItem.quotation_id
    raise TypeError(f"Unsupported document type {type(document).__name__}")


def recalculate_document_totals(db: Session, document: BillingDocument) -> DocumentTotals:
    """Recompute and persist subtotal/tax/total/tax_rate from the stored items.

    Runs inside the caller's unit of work; the caller holds the row lock on
    ``document``. Pending item changes are flushed first so the query sees them.
    """
    db.flush()
    item_model, parent_column = _item_model(document)
    amounts = [row[0] for row in db.query(item_model._amount).filter(parent_column == document.id).all()]
    totals = compute_document_totals(amounts, document.discount, resolve_tax_rate(db, document.country))
    document.apply_totals(totals)
    db.flush()
    return totals


def recalculate_invoice_totals(db: Session, invoice_id: int) -> DocumentTotals:
    with unit_of_work(db):
        invoice = _lock_document(db, Invoice, invoice_id)
        return recalculate_document_totals(db, invoice)


def recalculate_quotation_totals(db: Session, quotation_id: int) -> DocumentTotals:
    with unit_of_work(db):
        quotation = _lock_document(db, Quotation, quotation_id)
        return recalculate_document_totals(db, quotation)


def _lock_document(db: Session, model, document_id: int):
    try:
        return lock_row(db, model, document_id)
    except NotFoundError as exc:
        # A recompute is only ever triggered for a document that owns items.
        logger.error("Recalculation could not find %s %s", model.__name__, document_id)
        raise ConsistencyError(f"{model.__name__} {document_id} vanished during recalculation") from exc
