"""Subscription plan, usage and reference data schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class SubscriptionPlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: Decimal
    interval: str
    features: List[str]
    invoice_quota: int
    quote_quota: int
    material_records_limit: int
    includes_central_masters: bool
    is_active: bool


class SubscriptionChange(BaseModel):
    model_config = ConfigDict(extra="forbid")

    plan_id: str


class UsageSummary(BaseModel):
    plan_id: str
    subscription_status: str
    subscription_expires_at: Optional[datetime] = None
    invoice_quota: int
    invoices_used: int
    quote_quota: int
    quotes_used: int
    material_records_used: int


class MaterialUsageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    master_item_id: int
    quotation_id: Optional[int] = None
    used_at: datetime


class TaxRateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    country: str
    country_code: str
    name: str
    rate: Decimal
    is_default: bool


class TemplateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    type: str
    preview_url: Optional[str] = None
    is_default: bool
    is_premium: bool
