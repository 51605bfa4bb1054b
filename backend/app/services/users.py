"""User registration and plan changes."""

import logging

from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError, ValidationError
from backend.app.core.security import get_password_hash
from backend.app.db.unit_of_work import unit_of_work
from backend.app.models.subscription_plan import SubscriptionPlan
from backend.app.models.user import User
from backend.app.services.usage import update_user_subscription

logger = logging.getLogger(__name__)

FREE_PLAN = "free"


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def create_user(db: Session, *, email: str, password: str, full_name: str | None = None) -> User:
    """Register a user on the free plan with the free plan's quotas."""
    if not password or len(password) < 8:
        raise ValidationError("Password must be at least 8 characters")
    with unit_of_work(db):
        if get_user_by_email(db, email):
            raise ValidationError("Email already registered")
        plan = db.get(SubscriptionPlan, FREE_PLAN)
        user = User(
            email=email,
            full_name=full_name,
            hashed_password=get_password_hash(password),
            plan_id=FREE_PLAN,
            invoice_quota=plan.invoice_quota if plan else 10,
            invoices_used=0,
            quote_quota=plan.quote_quota if plan else 5,
            quotes_used=0,
            material_records_used=0,
            subscription_status="active",
            subscription_expires_at=None,
        )
        db.add(user)
        db.flush()
        logger.info("Registered user %s", user.id)
    db.refresh(user)
    return user


def change_plan(db: Session, user_id: int, plan_id: str) -> User:
    """Switch to a plan using that plan's invoice quota."""
    plan = db.get(SubscriptionPlan, plan_id)
    if plan is None or not plan.is_active:
        raise NotFoundError(f"Subscription plan '{plan_id}' not found")
    return update_user_subscription(db, user_id, plan_id, plan.invoice_quota)
