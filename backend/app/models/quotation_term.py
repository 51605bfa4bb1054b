from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class QuotationTerm(Base):
    __tablename__ = "quotation_terms"

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False, index=True)
    master_term_id = Column(Integer, ForeignKey("master_terms.id", ondelete="SET NULL"), nullable=True)
    company_term_id = Column(Integer, ForeignKey("company_terms.id", ondelete="SET NULL"), nullable=True)
    category = Column(String(64), nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)

    quotation = relationship("Quotation", back_populates="quotation_terms")
