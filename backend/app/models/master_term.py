from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, UniqueConstraint

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now


class MasterTerm(Base):
    __tablename__ = "master_terms"
    __table_args__ = (UniqueConstraint("category", "title", name="uq_master_term_category_title"),)

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
