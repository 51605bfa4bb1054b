from sqlalchemy import JSON, Boolean, Column, Integer, Numeric, String

from backend.app.db.base_class import Base


class SubscriptionPlan(Base):
    __tablename__ = "subscription_plans"

    # Natural key: "free", "monthly", "yearly", "per-invoice".
    id = Column(String(32), primary_key=True)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    interval = Column(String(32), nullable=False)
    features = Column(JSON, nullable=False, default=list)
    # -1 means unlimited for every quota column.
    invoice_quota = Column(Integer, nullable=False)
    quote_quota = Column(Integer, nullable=False, default=5)
    material_records_limit = Column(Integer, nullable=False, default=50)
    includes_central_masters = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
