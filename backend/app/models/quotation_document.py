from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class QuotationDocument(Base):
    __tablename__ = "quotation_documents"
    __table_args__ = (UniqueConstraint("quotation_id", "document_id", name="uq_quotation_document"),)

    id = Column(Integer, primary_key=True, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id"), nullable=False, index=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)

    quotation = relationship("Quotation", back_populates="documents")
    document = relationship("Document")
