"""Append-only log of master catalog usage, metered against plan limits."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now


class MaterialUsage(Base):
    __tablename__ = "material_usage"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    master_item_id = Column(Integer, ForeignKey("master_items.id"), nullable=False, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="SET NULL"), nullable=True)
    used_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
