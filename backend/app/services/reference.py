"""Read access to seeded reference data: plans, tax rates and templates."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.models.subscription_plan import SubscriptionPlan
from backend.app.models.tax_rate import TaxRate
from backend.app.models.template import Template


def get_subscription_plans(db: Session) -> List[SubscriptionPlan]:
    return (
        db.query(SubscriptionPlan)
        .filter(SubscriptionPlan.is_active.is_(True))
        .order_by(SubscriptionPlan.price.asc(), SubscriptionPlan.id.asc())
        .all()
    )


def get_subscription_plan(db: Session, plan_id: str) -> Optional[SubscriptionPlan]:
    return db.get(SubscriptionPlan, plan_id)


def get_tax_rates(db: Session, country_code: Optional[str] = None) -> List[TaxRate]:
    query = db.query(TaxRate)
    if country_code:
        query = query.filter(TaxRate.country_code == country_code.upper())
    return query.order_by(TaxRate.country.asc(), TaxRate.id.asc()).all()


def get_templates(db: Session, include_premium: bool, type: Optional[str] = None) -> List[Template]:
    """Templates visible to a user; premium layouts only for paid plans."""
    query = db.query(Template)
    if not include_premium:
        query = query.filter(Template.is_premium.is_(False))
    if type:
        query = query.filter(Template.type == type)
    return query.order_by(Template.is_default.desc(), Template.name.asc()).all()
