"""Handles user registration for the billing back-office."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.schemas.user import UserCreate, UserRead
from backend.app.services.users import create_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    return create_user(db, email=user_in.email, password=user_in.password, full_name=user_in.full_name)
