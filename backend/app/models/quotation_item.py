from decimal import Decimal

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base
from backend.app.models.derived import DerivedAmountMixin


class QuotationItem(DerivedAmountMixin, Base):
    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False, index=True)
    master_item_id = Column(Integer, ForeignKey("master_items.id", ondelete="SET NULL"), nullable=True)
    company_item_id = Column(Integer, ForeignKey("company_items.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(255), nullable=False)
    unit_of_measure = Column(String(32), nullable=True)
    quantity = Column(Numeric(10, 2), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(5, 2), nullable=False, default=Decimal("0.00"))

    quotation = relationship("Quotation", back_populates="items")
