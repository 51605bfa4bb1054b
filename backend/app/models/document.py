"""Uploaded files a user can attach to quotations."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from backend.app.db.base_class import Base
from backend.app.core.time import utc_now


class Document(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(64), nullable=False)
    file_url = Column(String(512), nullable=False)
    file_size = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
