"""Invoice model for billing."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base
from backend.app.models.derived import DerivedTotalsMixin

INVOICE_STATUSES = ("draft", "sent", "paid", "overdue", "cancelled")


class Invoice(DerivedTotalsMixin, Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    company_profile_id = Column(Integer, ForeignKey("company_profiles.id"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="SET NULL"), nullable=True, index=True)

    invoice_number = Column(String(64), nullable=False)
    invoice_date = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    due_date = Column(DateTime(timezone=True), nullable=True)
    country = Column(String(8), nullable=False)
    currency = Column(String(3), nullable=False)
    template_id = Column(String(64), nullable=True, default="classic")
    # Absolute currency amount, unlike the per-item percentage discount.
    discount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    status = Column(String, default="draft", nullable=False)
    pdf_url = Column(String(512), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", order_by="InvoiceItem.id")
    company_profile = relationship("CompanyProfile")
    client = relationship("Client")
