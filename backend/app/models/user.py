from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Quota fields are written only by the usage ledger and plan changes.
    plan_id = Column(String(32), nullable=False, default="free")
    invoice_quota = Column(Integer, nullable=False, default=10)
    invoices_used = Column(Integer, nullable=False, default=0)
    quote_quota = Column(Integer, nullable=False, default=5)
    quotes_used = Column(Integer, nullable=False, default=0)
    material_records_used = Column(Integer, nullable=False, default=0)
    subscription_status = Column(String(32), nullable=False, default="active")
    subscription_expires_at = Column(DateTime(timezone=True), nullable=True)

    company_profiles = relationship("CompanyProfile", back_populates="user", order_by="CompanyProfile.id")
    clients = relationship("Client", back_populates="user")
