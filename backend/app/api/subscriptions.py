"""Subscription plans, plan changes and usage counters."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.subscription import MaterialUsageRead, SubscriptionChange, SubscriptionPlanRead, UsageSummary
from backend.app.services import usage
from backend.app.services.reference import get_subscription_plans
from backend.app.services.users import change_plan

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("/plans", response_model=List[SubscriptionPlanRead])
def list_plans(db: Session = Depends(get_db)):
    return get_subscription_plans(db)


@router.get("/usage", response_model=UsageSummary)
def read_usage(current_user: User = Depends(get_current_user)):
    return usage.get_usage_summary(current_user)


@router.get("/material-usage", response_model=List[MaterialUsageRead])
def list_material_usage(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return usage.get_material_usage(db, current_user.id)


@router.post("/subscribe", response_model=UsageSummary)
def subscribe(change: SubscriptionChange, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # Payment capture happens outside this service; this only applies the plan.
    user = change_plan(db, current_user.id, change.plan_id)
    return usage.get_usage_summary(user)
