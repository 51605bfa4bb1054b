"""Material, service and terms catalog.

Master items and terms are a curated catalog shared by all users. Company items
and terms are user-owned copies that may point back at a master entry; that
link is an association only and feeds the usage ledger. Company terms keep one
default per (user, category).
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ValidationError
from backend.app.db.unit_of_work import get_or_raise, lock_row, unit_of_work
from backend.app.models.company_item import CompanyItem
from backend.app.models.company_term import CompanyTerm
from backend.app.models.master_item import MasterItem
from backend.app.models.master_term import MasterTerm
from backend.app.schemas.catalog import (
    CompanyItemCreate,
    CompanyItemUpdate,
    CompanyTermCreate,
    CompanyTermUpdate,
    MasterItemCreate,
    MasterItemUpdate,
    MasterTermCreate,
    MasterTermUpdate,
)
from backend.app.services import defaults, usage

logger = logging.getLogger(__name__)


def _require(data: dict, *fields: str) -> None:
    missing = [field for field in fields if field in data and not data[field]]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def _non_negative(value: Optional[Decimal], field: str) -> None:
    if value is not None and value < 0:
        raise ValidationError(f"{field} must not be negative")


# Master items

def get_master_items(db: Session, category: Optional[str] = None) -> List[MasterItem]:
    query = db.query(MasterItem).filter(MasterItem.is_active.is_(True))
    if category:
        query = query.filter(MasterItem.category == category)
    return query.order_by(MasterItem.name.asc()).all()


def get_master_item(db: Session, item_id: int) -> Optional[MasterItem]:
    return db.get(MasterItem, item_id)


def get_master_item_by_code(db: Session, code: str) -> Optional[MasterItem]:
    return db.query(MasterItem).filter(MasterItem.code == code).first()


def create_master_item(db: Session, item_in: MasterItemCreate) -> MasterItem:
    data = item_in.model_dump()
    _require(data, "name", "description", "category", "unit_of_measure")
    _non_negative(item_in.default_price, "default_price")
    with unit_of_work(db):
        item = MasterItem(is_active=True, **data)
        db.add(item)
        db.flush()
    db.refresh(item)
    return item


def update_master_item(db: Session, item_id: int, item_in: MasterItemUpdate) -> MasterItem:
    changes = item_in.model_dump(exclude_unset=True)
    _require(changes, "name", "description", "category", "unit_of_measure")
    _non_negative(changes.get("default_price"), "default_price")
    with unit_of_work(db):
        item = lock_row(db, MasterItem, item_id, "Master item")
        for field, value in changes.items():
            setattr(item, field, value)
        db.flush()
    db.refresh(item)
    return item


# Master terms

def get_master_terms(db: Session, category: Optional[str] = None) -> List[MasterTerm]:
    query = db.query(MasterTerm).filter(MasterTerm.is_active.is_(True))
    if category:
        query = query.filter(MasterTerm.category == category)
    return query.order_by(MasterTerm.category.asc(), MasterTerm.title.asc()).all()


def get_master_term(db: Session, term_id: int) -> Optional[MasterTerm]:
    return db.get(MasterTerm, term_id)


def create_master_term(db: Session, term_in: MasterTermCreate) -> MasterTerm:
    data = term_in.model_dump()
    _require(data, "category", "title", "content")
    with unit_of_work(db):
        term = MasterTerm(is_active=True, **data)
        db.add(term)
        db.flush()
    db.refresh(term)
    return term


def update_master_term(db: Session, term_id: int, term_in: MasterTermUpdate) -> MasterTerm:
    changes = term_in.model_dump(exclude_unset=True)
    _require(changes, "category", "title", "content")
    with unit_of_work(db):
        term = lock_row(db, MasterTerm, term_id, "Master term")
        for field, value in changes.items():
            setattr(term, field, value)
        db.flush()
    db.refresh(term)
    return term


def delete_master_term(db: Session, term_id: int) -> None:
    with unit_of_work(db):
        term = lock_row(db, MasterTerm, term_id, "Master term")
        db.delete(term)
        db.flush()


# Company items

def get_company_items(db: Session, user_id: int, category: Optional[str] = None) -> List[CompanyItem]:
    query = db.query(CompanyItem).filter(CompanyItem.user_id == user_id, CompanyItem.is_active.is_(True))
    if category:
        query = query.filter(CompanyItem.category == category)
    return query.order_by(CompanyItem.name.asc()).all()


def get_company_item(db: Session, item_id: int) -> Optional[CompanyItem]:
    return db.get(CompanyItem, item_id)


def create_company_item(db: Session, user_id: int, item_in: CompanyItemCreate) -> CompanyItem:
    """Create a company item; copying a master item is metered as material usage."""
    data = item_in.model_dump()
    _require(data, "name", "description", "category", "unit_of_measure")
    _non_negative(item_in.price, "price")
    _non_negative(item_in.cost, "cost")
    with unit_of_work(db):
        if item_in.master_item_id is not None:
            usage.track_material_usage(db, user_id, item_in.master_item_id, quotation_id=None)
        item = CompanyItem(user_id=user_id, is_active=True, **data)
        db.add(item)
        db.flush()
    db.refresh(item)
    return item


def update_company_item(db: Session, item_id: int, item_in: CompanyItemUpdate) -> CompanyItem:
    changes = item_in.model_dump(exclude_unset=True)
    _require(changes, "name", "description", "category", "unit_of_measure")
    if "price" in changes and changes["price"] is None:
        raise ValidationError("price cannot be cleared")
    _non_negative(changes.get("price"), "price")
    _non_negative(changes.get("cost"), "cost")
    with unit_of_work(db):
        item = lock_row(db, CompanyItem, item_id, "Company item")
        for field, value in changes.items():
            setattr(item, field, value)
        db.flush()
    db.refresh(item)
    return item


def delete_company_item(db: Session, item_id: int) -> None:
    with unit_of_work(db):
        item = lock_row(db, CompanyItem, item_id, "Company item")
        db.delete(item)
        db.flush()


# Company terms

def _term_scope(user_id: int, category: str) -> dict:
    return {"user_id": user_id, "category": category}


def get_company_terms(db: Session, user_id: int, category: Optional[str] = None) -> List[CompanyTerm]:
    query = db.query(CompanyTerm).filter(CompanyTerm.user_id == user_id)
    if category:
        query = query.filter(CompanyTerm.category == category)
    return query.order_by(CompanyTerm.is_default.desc(), CompanyTerm.category.asc(), CompanyTerm.title.asc()).all()


def get_company_term(db: Session, term_id: int) -> Optional[CompanyTerm]:
    return db.get(CompanyTerm, term_id)


def get_default_company_term(db: Session, user_id: int, category: str) -> Optional[CompanyTerm]:
    return (
        db.query(CompanyTerm)
        .filter(CompanyTerm.user_id == user_id, CompanyTerm.category == category, CompanyTerm.is_default.is_(True))
        .first()
    )


def create_company_term(db: Session, user_id: int, term_in: CompanyTermCreate) -> CompanyTerm:
    data = term_in.model_dump(exclude={"is_default"})
    _require(data, "category", "title", "content")
    with unit_of_work(db):
        usage.lock_user(db, user_id)
        if term_in.master_term_id is not None:
            get_or_raise(db, MasterTerm, term_in.master_term_id, "Master term")
        scope = _term_scope(user_id, term_in.category)
        is_default = defaults.resolve_default_on_create(db, CompanyTerm, scope, term_in.is_default)
        term = CompanyTerm(user_id=user_id, is_default=is_default, **data)
        db.add(term)
        db.flush()
        defaults.verify_single_default(db, CompanyTerm, scope)
    db.refresh(term)
    return term


def update_company_term(db: Session, term_id: int, term_in: CompanyTermUpdate) -> CompanyTerm:
    """Update a term; moving it to another category re-applies the default rules
    in both the category it leaves and the one it joins."""
    changes = term_in.model_dump(exclude_unset=True)
    requested_default = changes.pop("is_default", None)
    _require(changes, "category", "title", "content")
    with unit_of_work(db):
        term = get_or_raise(db, CompanyTerm, term_id, "Company term")
        usage.lock_user(db, term.user_id)
        term = lock_row(db, CompanyTerm, term_id, "Company term")
        old_scope = _term_scope(term.user_id, term.category)

        new_category = changes.pop("category", term.category)
        for field, value in changes.items():
            setattr(term, field, value)

        if new_category != term.category:
            if term.is_default:
                defaults.promote_replacement(db, CompanyTerm, old_scope, leaving_id=term.id)
            term.category = new_category
            term.is_default = False
            db.flush()
            new_scope = _term_scope(term.user_id, new_category)
            others = [row for row in defaults.scope_rows(db, CompanyTerm, new_scope) if row.id != term.id]
            if not others or requested_default:
                defaults.set_as_default(db, CompanyTerm, term, new_scope)
            defaults.verify_single_default(db, CompanyTerm, old_scope)
        else:
            new_scope = old_scope
            if requested_default is True:
                defaults.set_as_default(db, CompanyTerm, term, new_scope)
            elif requested_default is False and term.is_default:
                raise ValidationError("Set another term as default instead of unsetting the default")
        db.flush()
        defaults.verify_single_default(db, CompanyTerm, new_scope)
    db.refresh(term)
    return term


def set_default_company_term(db: Session, user_id: int, term_id: int) -> CompanyTerm:
    with unit_of_work(db):
        usage.lock_user(db, user_id)
        term = lock_row(db, CompanyTerm, term_id, "Company term")
        if term.user_id != user_id:
            raise ValidationError("Company term does not belong to this user")
        scope = _term_scope(user_id, term.category)
        defaults.set_as_default(db, CompanyTerm, term, scope)
        defaults.verify_single_default(db, CompanyTerm, scope)
    db.refresh(term)
    return term


def delete_company_term(db: Session, term_id: int) -> None:
    with unit_of_work(db):
        term = get_or_raise(db, CompanyTerm, term_id, "Company term")
        usage.lock_user(db, term.user_id)
        term = lock_row(db, CompanyTerm, term_id, "Company term")
        scope = _term_scope(term.user_id, term.category)
        if term.is_default:
            defaults.promote_replacement(db, CompanyTerm, scope, leaving_id=term.id)
        db.delete(term)
        db.flush()
        defaults.verify_single_default(db, CompanyTerm, scope)
