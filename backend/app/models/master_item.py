"""Curated material/service catalog shared by all users."""

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now


class MasterItem(Base):
    __tablename__ = "master_items"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(32), unique=True, nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(64), nullable=False, index=True)
    unit_of_measure = Column(String(32), nullable=False)
    default_price = Column(Numeric(10, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
