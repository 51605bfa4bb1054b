"""Referential integrity guard for deletes of shared, non-owned entities.

Invoices and quotations hold non-owning references to clients and company
profiles; the material usage log references master items. Deleting a row that
is still referenced fails with ReferencedEntityError and changes nothing. The
check and the delete share one unit of work with the owning user row locked,
the same lock invoice and quotation creation take.
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ReferencedEntityError, ValidationError
from backend.app.db.unit_of_work import get_or_raise, lock_row, unit_of_work
from backend.app.models.client import Client
from backend.app.models.company_profile import CompanyProfile
from backend.app.models.invoice import Invoice
from backend.app.models.master_item import MasterItem
from backend.app.models.material_usage import MaterialUsage
from backend.app.models.quotation import Quotation
from backend.app.models.user import User
from backend.app.services import defaults

logger = logging.getLogger(__name__)

# kind -> (label, model, [(referencing model, column, plural label)])
REFERENCES: Dict[str, Tuple[str, type, List[Tuple[type, str, str]]]] = {
    "client": (
        "client",
        Client,
        [(Invoice, "client_id", "invoices"), (Quotation, "client_id", "quotations")],
    ),
    "company_profile": (
        "company profile",
        CompanyProfile,
        [(Invoice, "company_profile_id", "invoices"), (Quotation, "company_profile_id", "quotations")],
    ),
    "master_item": (
        "master item",
        MasterItem,
        [(MaterialUsage, "master_item_id", "material records")],
    ),
}


def _references_for(kind: str):
    try:
        return REFERENCES[kind]
    except KeyError:
        raise ValidationError(f"Unknown entity kind '{kind}'")


def find_blocking_reference(db: Session, kind: str, entity_id: int) -> Optional[str]:
    """Return the plural label of the first table still referencing the row."""
    _, _, references = _references_for(kind)
    db.flush()
    for model, column, plural in references:
        hit = db.query(model.id).filter(getattr(model, column) == entity_id).limit(1).first()
        if hit is not None:
            return plural
    return None


def can_delete(db: Session, kind: str, entity_id: int) -> bool:
    return find_blocking_reference(db, kind, entity_id) is None


def ensure_deletable(db: Session, kind: str, entity_id: int) -> None:
    label = _references_for(kind)[0]
    blocking = find_blocking_reference(db, kind, entity_id)
    if blocking is not None:
        logger.info("Blocked delete of %s %s referenced by %s", label, entity_id, blocking)
        raise ReferencedEntityError(f"Cannot delete {label} that is used in {blocking}")


def delete_client(db: Session, client_id: int) -> None:
    with unit_of_work(db):
        client = get_or_raise(db, Client, client_id, "Client")
        lock_row(db, User, client.user_id, "User")
        client = lock_row(db, Client, client_id, "Client")
        ensure_deletable(db, "client", client_id)
        db.delete(client)
        db.flush()


def delete_company_profile(db: Session, profile_id: int) -> None:
    """Delete a profile, promoting another one if it was the user's default.

    The reference check runs before promotion, so a blocked delete leaves the
    default untouched.
    """
    with unit_of_work(db):
        profile = get_or_raise(db, CompanyProfile, profile_id, "Company profile")
        user_id = profile.user_id
        lock_row(db, User, user_id, "User")
        profile = lock_row(db, CompanyProfile, profile_id, "Company profile")
        ensure_deletable(db, "company_profile", profile_id)

        scope = {"user_id": user_id}
        if profile.is_default:
            defaults.promote_replacement(db, CompanyProfile, scope, leaving_id=profile_id)
        db.delete(profile)
        db.flush()
        defaults.verify_single_default(db, CompanyProfile, scope)


def delete_master_item(db: Session, master_item_id: int) -> None:
    with unit_of_work(db):
        item = lock_row(db, MasterItem, master_item_id, "Master item")
        ensure_deletable(db, "master_item", master_item_id)
        db.delete(item)
        db.flush()
