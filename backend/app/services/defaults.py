"""Default-row invariant for company profiles and company terms.

Within a scope (one user for profiles, one user + category for terms) at most
one row is the default, and a non-empty scope always has exactly one. Every
function here expects to run inside the caller's unit of work with the owning
user row locked, so concurrent mutations of the same scope are serialized.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ConsistencyError

logger = logging.getLogger(__name__)


def _scope_query(db: Session, model, scope: Dict[str, Any]):
    query = db.query(model)
    for column, value in scope.items():
        query = query.filter(getattr(model, column) == value)
    return query


def scope_rows(db: Session, model, scope: Dict[str, Any]) -> List[Any]:
    db.flush()
    return _scope_query(db, model, scope).order_by(model.id.asc()).all()


def clear_defaults(db: Session, model, scope: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
    for row in scope_rows(db, model, scope):
        if row.is_default and row.id != exclude_id:
            row.is_default = False
    db.flush()


def set_as_default(db: Session, model, target, scope: Dict[str, Any]) -> None:
    """Clear every other default in the scope, then mark ``target``."""
    clear_defaults(db, model, scope, exclude_id=target.id)
    target.is_default = True
    db.flush()


def resolve_default_on_create(db: Session, model, scope: Dict[str, Any], requested: bool) -> bool:
    """Return the flag a new row should get, clearing existing defaults if needed.

    The first row in an empty scope is always the default.
    """
    existing = scope_rows(db, model, scope)
    if not existing:
        return True
    if requested:
        clear_defaults(db, model, scope)
    return bool(requested)


def promote_replacement(db: Session, model, scope: Dict[str, Any], leaving_id: int) -> Optional[Any]:
    """Promote the lowest-id remaining row when the default leaves the scope."""
    for row in scope_rows(db, model, scope):
        if row.id != leaving_id:
            row.is_default = True
            db.flush()
            logger.info("Promoted %s %s to default after %s left %s", model.__name__, row.id, leaving_id, scope)
            return row
    return None


def verify_single_default(db: Session, model, scope: Dict[str, Any]) -> None:
    rows = scope_rows(db, model, scope)
    if not rows:
        return
    defaults = [row.id for row in rows if row.is_default]
    if len(defaults) != 1:
        logger.error("%s scope %s has %d defaults: %s", model.__name__, scope, len(defaults), defaults)
        raise ConsistencyError(f"{model.__name__} scope {scope} has {len(defaults)} defaults, expected 1")
