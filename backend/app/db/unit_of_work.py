"""Scoped unit of work shared by every storage service.

Each public service operation runs inside ``unit_of_work(db)``: one database
transaction that commits when the outermost block exits cleanly and rolls back
on any error. Blocks nest, so a service may call another service without
splitting the transaction. Row locks taken with ``lock_row`` are held until the
outermost block finishes.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Type, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

_DEPTH_KEY = "unit_of_work_depth"

ModelT = TypeVar("ModelT")


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    depth = db.info.get(_DEPTH_KEY, 0)
    db.info[_DEPTH_KEY] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except IntegrityError as exc:
        if depth == 0:
            db.rollback()
        logger.warning("Integrity constraint violated: %s", exc.orig)
        raise ValidationError("The change conflicts with existing data") from exc
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_DEPTH_KEY] = depth


def lock_row(db: Session, model: Type[ModelT], row_id: int, label: str | None = None) -> ModelT:
    """Load a row with ``SELECT ... FOR UPDATE`` or raise NotFoundError.

    SQLite ignores the lock clause; its database-level write lock serializes
    writers instead.
    """
    row = (
        db.query(model)
        .filter(model.id == row_id)
        .with_for_update()
        .populate_existing()
        .first()
    )
    if row is None:
        name = label or model.__name__
        raise NotFoundError(f"{name} with ID {row_id} not found")
    return row


def get_or_raise(db: Session, model: Type[ModelT], row_id: int, label: str | None = None) -> ModelT:
    row = db.get(model, row_id)
    if row is None:
        name = label or model.__name__
        raise NotFoundError(f"{name} with ID {row_id} not found")
    return row
