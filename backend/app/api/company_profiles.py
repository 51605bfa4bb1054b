"""Company profile routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import ensure_owned, get_current_user
from backend.app.models.user import User
from backend.app.schemas.company_profile import CompanyProfileCreate, CompanyProfileRead, CompanyProfileUpdate
from backend.app.services import company_profiles as service
from backend.app.services.integrity import delete_company_profile

router = APIRouter(prefix="/company-profiles", tags=["company-profiles"])


@router.get("/", response_model=List[CompanyProfileRead])
def list_company_profiles(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return service.get_company_profiles(db, current_user.id)


@router.get("/default", response_model=CompanyProfileRead)
def get_default_company_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return ensure_owned(service.get_default_company_profile(db, current_user.id), current_user, "Company profile")


@router.post("/", response_model=CompanyProfileRead, status_code=status.HTTP_201_CREATED)
def create_company_profile(
    profile_in: CompanyProfileCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return service.create_company_profile(db, current_user.id, profile_in)


@router.get("/{profile_id}", response_model=CompanyProfileRead)
def get_company_profile(profile_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return ensure_owned(service.get_company_profile(db, profile_id), current_user, "Company profile")


@router.patch("/{profile_id}", response_model=CompanyProfileRead)
def update_company_profile(
    profile_id: int,
    profile_in: CompanyProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owned(service.get_company_profile(db, profile_id), current_user, "Company profile")
    return service.update_company_profile(db, profile_id, profile_in)


@router.post("/{profile_id}/set-default", response_model=CompanyProfileRead)
def set_default_company_profile(
    profile_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ensure_owned(service.get_company_profile(db, profile_id), current_user, "Company profile")
    return service.set_default_company_profile(db, current_user.id, profile_id)


@router.delete("/{profile_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_company_profile(profile_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owned(service.get_company_profile(db, profile_id), current_user, "Company profile")
    delete_company_profile(db, profile_id)
