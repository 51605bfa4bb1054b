from sqlalchemy import Boolean, Column, Integer, Numeric, String, UniqueConstraint

from backend.app.db.base_class import Base


class TaxRate(Base):
    __tablename__ = "tax_rates"
    __table_args__ = (UniqueConstraint("country_code", "name", name="uq_tax_rate_country_name"),)

    id = Column(Integer, primary_key=True, index=True)
    country = Column(String(100), nullable=False)
    country_code = Column(String(8), nullable=False, index=True)
    name = Column(String(64), nullable=False)
    # Percentage, e.g. 20.00 for 20%.
    rate = Column(Numeric(5, 2), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
