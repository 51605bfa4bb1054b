"""Invoice schemas.

Subtotal, tax, tax rate and total are read-only: they are derived from the
items and never accepted from callers.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from backend.app.schemas.invoice_item import InvoiceItemRead

InvoiceStatus = Literal["draft", "sent", "paid", "overdue", "cancelled"]


class InvoiceCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_profile_id: int
    client_id: int
    invoice_number: str
    invoice_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    country: str
    currency: str
    template_id: Optional[str] = "classic"
    discount: Decimal = Decimal("0.00")
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: InvoiceStatus = "draft"


class InvoiceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_profile_id: Optional[int] = None
    client_id: Optional[int] = None
    invoice_number: Optional[str] = None
    invoice_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    country: Optional[str] = None
    currency: Optional[str] = None
    template_id: Optional[str] = None
    discount: Optional[Decimal] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    pdf_url: Optional[str] = None


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company_profile_id: int
    client_id: int
    quotation_id: Optional[int] = None

    invoice_number: str
    invoice_date: datetime
    due_date: Optional[datetime] = None
    country: str
    currency: str
    template_id: Optional[str] = None
    discount: Decimal
    tax_rate: Optional[Decimal] = None
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: str
    pdf_url: Optional[str] = None

    created_at: datetime
    updated_at: datetime


class InvoiceDetail(InvoiceRead):
    items: List[InvoiceItemRead] = []
