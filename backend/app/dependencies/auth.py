"""Authentication dependencies for retrieving the current user."""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from backend.app.core.exceptions import NotFoundError
from backend.app.core.security import decode_access_token
from backend.app.db.session import get_db
from backend.app.models.user import User


def get_current_user(db: Session = Depends(get_db), authorization: str | None = Header(default=None)) -> User:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = payload.get("sub")
    try:
        user_id_int = int(user_id)
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = db.get(User, user_id_int)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def ensure_owned(row, current_user: User, label: str):
    """Return ``row`` if the current user owns it; otherwise it does not exist for them."""
    if row is None or row.user_id != current_user.id:
        raise NotFoundError(f"{label} not found")
    return row
