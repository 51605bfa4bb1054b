"""Material and terms catalog routes.

The master catalog is read-only over HTTP; users curate their own company
items and terms, optionally copied from a master entry.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_owned, get_current_user
from backend.app.models.user import User
from backend.app.schemas.catalog import (
    CompanyItemCreate,
    CompanyItemRead,
    CompanyItemUpdate,
    CompanyTermCreate,
    CompanyTermRead,
    CompanyTermUpdate,
    MasterItemRead,
    MasterTermRead,
)
from backend.app.services import catalog as service

router = APIRouter(tags=["catalog"])


@router.get("/materials/master", response_model=List[MasterItemRead])
def list_master_items(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_master_items(db, category)


@router.get("/materials/master/{item_id}", response_model=MasterItemRead)
def get_master_item(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    item = service.get_master_item(db, item_id)
    if item is None:
        raise NotFoundError("Master item not found")
    return item


@router.get("/materials", response_model=List[CompanyItemRead])
def list_company_items(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_company_items(db, current_user.id, category)


@router.post("/materials", response_model=CompanyItemRead, status_code=status.HTTP_201_CREATED)
def create_company_item(
    item_in: CompanyItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_company_item(db, current_user.id, item_in)


@router.patch("/materials/{item_id}", response_model=CompanyItemRead)
def update_company_item(
    item_id: int,
    item_in: CompanyItemUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owned(service.get_company_item(db, item_id), current_user, "Company item")
    return service.update_company_item(db, item_id, item_in)


@router.delete("/materials/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_item(item_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owned(service.get_company_item(db, item_id), current_user, "Company item")
    service.delete_company_item(db, item_id)


@router.get("/terms/master", response_model=List[MasterTermRead])
def list_master_terms(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_master_terms(db, category)


@router.get("/terms", response_model=List[CompanyTermRead])
def list_company_terms(
    category: str | None = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.get_company_terms(db, current_user.id, category)


@router.post("/terms", response_model=CompanyTermRead, status_code=status.HTTP_201_CREATED)
def create_company_term(
    term_in: CompanyTermCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_company_term(db, current_user.id, term_in)


@router.patch("/terms/{term_id}", response_model=CompanyTermRead)
def update_company_term(
    term_id: int,
    term_in: CompanyTermUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owned(service.get_company_term(db, term_id), current_user, "Company term")
    return service.update_company_term(db, term_id, term_in)


@router.post("/terms/{term_id}/set-default", response_model=CompanyTermRead)
def set_default_company_term(term_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owned(service.get_company_term(db, term_id), current_user, "Company term")
    return service.set_default_company_term(db, current_user.id, term_id)


@router.delete("/terms/{term_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_term(term_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owned(service.get_company_term(db, term_id), current_user, "Company term")
    service.delete_company_term(db, term_id)
