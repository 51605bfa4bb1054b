"""Document layout presets used by the PDF renderer."""

from sqlalchemy import Boolean, Column, String

from backend.app.db.base_class import Base


class Template(Base):
    __tablename__ = "templates"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    type = Column(String(32), nullable=False, default="invoice")
    preview_url = Column(String(512), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    is_premium = Column(Boolean, nullable=False, default=False)
