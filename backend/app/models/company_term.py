from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text

from backend.app.db.base_class import Base


class CompanyTerm(Base):
    __tablename__ = "company_terms"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    master_term_id = Column(Integer, ForeignKey("master_terms.id", ondelete="SET NULL"), nullable=True)
    category = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    # One default per (user, category).
    is_default = Column(Boolean, nullable=False, default=False)
