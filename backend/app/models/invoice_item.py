"""Invoice item model for billing entries."""

from decimal import Decimal

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.derived import DerivedAmountMixin


class InvoiceItem(DerivedAmountMixin, Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    quotation_item_id = Column(Integer, ForeignKey("quotation_items.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(255), nullable=False)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    # Percentage, 0-100.
    discount = Column(Numeric(5, 2), nullable=False, default=Decimal("0.00"))

    invoice = relationship("Invoice", back_populates="items")
