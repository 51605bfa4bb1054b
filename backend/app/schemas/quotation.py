"""Quotation schemas, including items, attached terms and document links."""

from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict

QuotationStatus = Literal["draft", "sent", "accepted", "rejected", "expired"]


class QuotationItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: str
    unit_of_measure: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal = Decimal("0")
    master_item_id: Optional[int] = None
    company_item_id: Optional[int] = None


class QuotationItemUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    unit_of_measure: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    discount: Optional[Decimal] = None


class QuotationItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quotation_id: int
    master_item_id: Optional[int] = None
    company_item_id: Optional[int] = None
    description: str
    unit_of_measure: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    discount: Decimal
    amount: Decimal


class QuotationTermCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    title: str
    content: str
    sort_order: int = 0
    master_term_id: Optional[int] = None
    company_term_id: Optional[int] = None


class QuotationTermUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    sort_order: Optional[int] = None


class QuotationTermRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quotation_id: int
    master_term_id: Optional[int] = None
    company_term_id: Optional[int] = None
    category: str
    title: str
    content: str
    sort_order: int


class QuotationDocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    quotation_id: int
    document_id: int


class QuotationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_profile_id: int
    client_id: int
    quote_number: str
    quote_date: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    country: str
    currency: str
    template_id: Optional[str] = "classic"
    discount: Decimal = Decimal("0.00")
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: QuotationStatus = "draft"


class QuotationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company_profile_id: Optional[int] = None
    client_id: Optional[int] = None
    quote_number: Optional[str] = None
    quote_date: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    country: Optional[str] = None
    currency: Optional[str] = None
    template_id: Optional[str] = None
    discount: Optional[Decimal] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    status: Optional[QuotationStatus] = None
    pdf_url: Optional[str] = None


class QuotationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company_profile_id: int
    client_id: int

    quote_number: str
    quote_date: datetime
    valid_until: Optional[datetime] = None
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


class QuotationDetail(QuotationRead):
    items: List[QuotationItemRead] = []
    quotation_terms: List[QuotationTermRead] = []
