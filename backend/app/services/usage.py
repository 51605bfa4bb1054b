"""Quota and usage ledger.

Counters on the user row are only ever moved here. A quota check happens
before the record it guards is created and the matching increment after, all
inside the creating operation's unit of work with the user row locked, so a
rejected or rolled-back creation never consumes quota.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError, QuotaExceededError, SubscriptionExpiredError
from backend.app.core.settings import get_settings
from backend.app.core.time import as_utc, utc_now
from backend.app.db.unit_of_work import get_or_raise, lock_row, unit_of_work
from backend.app.models.master_item import MasterItem
from backend.app.models.material_usage import MaterialUsage
from backend.app.models.subscription_plan import SubscriptionPlan
from backend.app.models.user import User

logger = logging.getLogger(__name__)

UNLIMITED = -1
PER_INVOICE_PLAN = "per-invoice"
REASON_BUNDLE_EXPIRED = "bundle expired"
REASON_QUOTA_EXCEEDED = "quota exceeded"


@dataclass(frozen=True)
class QuotaCheck:
    allowed: bool
    reason: Optional[str] = None


def lock_user(db: Session, user_id: int) -> User:
    return lock_row(db, User, user_id, "User")


def _check(user: User, quota: Optional[int], used: Optional[int], now: Optional[datetime]) -> QuotaCheck:
    now = now or utc_now()
    expires_at = as_utc(user.subscription_expires_at)
    if user.plan_id == PER_INVOICE_PLAN and expires_at is not None and now > expires_at:
        return QuotaCheck(False, REASON_BUNDLE_EXPIRED)
    quota = quota if quota is not None else 0
    if quota != UNLIMITED and (used or 0) >= quota:
        return QuotaCheck(False, REASON_QUOTA_EXCEEDED)
    return QuotaCheck(True)


def check_invoice_quota(db: Session, user_id: int, now: Optional[datetime] = None) -> QuotaCheck:
    user = get_or_raise(db, User, user_id, "User")
    return _check(user, user.invoice_quota, user.invoices_used, now)


def check_quote_quota(db: Session, user_id: int, now: Optional[datetime] = None) -> QuotaCheck:
    user = get_or_raise(db, User, user_id, "User")
    return _check(user, user.quote_quota, user.quotes_used, now)


def _raise_for(check: QuotaCheck, what: str) -> None:
    if check.allowed:
        return
    if check.reason == REASON_BUNDLE_EXPIRED:
        raise SubscriptionExpiredError(f"Your {what} bundle has expired")
    raise QuotaExceededError(f"You have reached your {what} quota for this period")


def ensure_invoice_quota(db: Session, user_id: int, now: Optional[datetime] = None) -> None:
    check = check_invoice_quota(db, user_id, now)
    if not check.allowed:
        logger.info("Invoice creation denied for user %s: %s", user_id, check.reason)
    _raise_for(check, "invoice")


def ensure_quote_quota(db: Session, user_id: int, now: Optional[datetime] = None) -> None:
    check = check_quote_quota(db, user_id, now)
    if not check.allowed:
        logger.info("Quotation creation denied for user %s: %s", user_id, check.reason)
    _raise_for(check, "quotation")


def increment_invoice_usage(db: Session, user_id: int) -> User:
    with unit_of_work(db):
        user = lock_user(db, user_id)
        user.invoices_used = (user.invoices_used or 0) + 1
        db.flush()
        return user


def increment_quote_usage(db: Session, user_id: int) -> User:
    with unit_of_work(db):
        user = lock_user(db, user_id)
        user.quotes_used = (user.quotes_used or 0) + 1
        db.flush()
        return user


def increment_material_usage(db: Session, user_id: int) -> User:
    with unit_of_work(db):
        user = lock_user(db, user_id)
        user.material_records_used = (user.material_records_used or 0) + 1
        db.flush()
        return user


def track_material_usage(db: Session, user_id: int, master_item_id: int, quotation_id: Optional[int] = None) -> MaterialUsage:
    """Append a usage row and bump the user's material counter together."""
    with unit_of_work(db):
        get_or_raise(db, MasterItem, master_item_id, "Master item")
        increment_material_usage(db, user_id)
        record = MaterialUsage(
            user_id=user_id,
            master_item_id=master_item_id,
            quotation_id=quotation_id,
            used_at=utc_now(),
        )
        db.add(record)
        db.flush()
        return record


def get_material_usage(db: Session, user_id: int) -> List[MaterialUsage]:
    return (
        db.query(MaterialUsage)
        .filter(MaterialUsage.user_id == user_id)
        .order_by(MaterialUsage.used_at.desc(), MaterialUsage.id.desc())
        .all()
    )


def update_user_subscription(db: Session, user_id: int, plan_id: str, quota: int) -> User:
    """Move the user to ``plan_id`` with a fresh period.

    Usage counters reset to zero; only the pay-as-you-go bundle gets an expiry.
    """
    with unit_of_work(db):
        plan = db.get(SubscriptionPlan, plan_id)
        if plan is None:
            raise NotFoundError(f"Subscription plan '{plan_id}' not found")
        user = lock_user(db, user_id)
        user.plan_id = plan_id
        user.invoice_quota = quota
        user.quote_quota = plan.quote_quota
        user.invoices_used = 0
        user.quotes_used = 0
        user.material_records_used = 0
        user.subscription_status = "active"
        if plan_id == PER_INVOICE_PLAN:
            user.subscription_expires_at = utc_now() + timedelta(days=get_settings().bundle_validity_days)
        else:
            user.subscription_expires_at = None
        db.flush()
        logger.info("User %s moved to plan %s (invoice quota %s)", user_id, plan_id, quota)
        return user


def get_usage_summary(user: User) -> dict:
    return {
        "plan_id": user.plan_id,
        "subscription_status": user.subscription_status,
        "subscription_expires_at": as_utc(user.subscription_expires_at),
        "invoice_quota": user.invoice_quota,
        "invoices_used": user.invoices_used,
        "quote_quota": user.quote_quota,
        "quotes_used": user.quotes_used,
        "material_records_used": user.material_records_used,
    }
