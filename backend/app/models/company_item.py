"""User-owned catalog entries, optionally copied from a master item."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, Text

from backend.app.db.base_class import Base


class CompanyItem(Base):
    __tablename__ = "company_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Association with the master catalog, not ownership.
    master_item_id = Column(Integer, ForeignKey("master_items.id", ondelete="SET NULL"), nullable=True)
    code = Column(String(32), nullable=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, index=True)
    unit_of_measure = Column(String(32), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
