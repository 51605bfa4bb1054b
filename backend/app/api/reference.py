"""Tax rates and document templates."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.subscription import TaxRateRead, TemplateRead
from backend.app.services.reference import get_tax_rates, get_templates
from backend.app.services.users import FREE_PLAN

router = APIRouter(tags=["reference"])


@router.get("/tax-rates", response_model=List[TaxRateRead])
def list_tax_rates(db: Session = Depends(get_db)):
    return get_tax_rates(db)


@router.get("/tax-rates/{country_code}", response_model=List[TaxRateRead])
def list_tax_rates_for_country(country_code: str, db: Session = Depends(get_db)):
    rates = get_tax_rates(db, country_code)
    if not rates:
        raise NotFoundError(f"No tax rates for country '{country_code}'")
    return rates


@router.get("/templates", response_model=List[TemplateRead])
def list_templates(
    type: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return get_templates(db, include_premium=current_user.plan_id != FREE_PLAN, type=type)
