"""Company profile store operations that maintain the one-default invariant."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.core.exceptions import ValidationError
from backend.app.db.unit_of_work import get_or_raise, lock_row, unit_of_work
from backend.app.models.company_profile import CompanyProfile
from backend.app.schemas.company_profile import CompanyProfileCreate, CompanyProfileUpdate
from backend.app.services import defaults
from backend.app.services.usage import lock_user


def _scope(user_id: int) -> dict:
    return {"user_id": user_id}


def get_company_profiles(db: Session, user_id: int) -> List[CompanyProfile]:
    return (
        db.query(CompanyProfile)
        .filter(CompanyProfile.user_id == user_id)
        .order_by(CompanyProfile.id.asc())
        .all()
    )


def get_company_profile(db: Session, profile_id: int) -> Optional[CompanyProfile]:
    return db.get(CompanyProfile, profile_id)


def get_default_company_profile(db: Session, user_id: int) -> Optional[CompanyProfile]:
    return (
        db.query(CompanyProfile)
        .filter(CompanyProfile.user_id == user_id, CompanyProfile.is_default.is_(True))
        .first()
    )


def create_company_profile(db: Session, user_id: int, profile_in: CompanyProfileCreate) -> CompanyProfile:
    """Create a profile; the user's first profile is always the default."""
    with unit_of_work(db):
        lock_user(db, user_id)
        scope = _scope(user_id)
        data = profile_in.model_dump(exclude={"is_default"})
        is_default = defaults.resolve_default_on_create(db, CompanyProfile, scope, profile_in.is_default)
        profile = CompanyProfile(user_id=user_id, is_default=is_default, **data)
        db.add(profile)
        db.flush()
        defaults.verify_single_default(db, CompanyProfile, scope)
    db.refresh(profile)
    return profile


def update_company_profile(db: Session, profile_id: int, profile_in: CompanyProfileUpdate) -> CompanyProfile:
    with unit_of_work(db):
        profile = get_or_raise(db, CompanyProfile, profile_id, "Company profile")
        lock_user(db, profile.user_id)
        profile = lock_row(db, CompanyProfile, profile_id, "Company profile")
        scope = _scope(profile.user_id)

        changes = profile_in.model_dump(exclude_unset=True)
        requested_default = changes.pop("is_default", None)
        if "name" in changes and not changes["name"]:
            raise ValidationError("name is required")
        for field, value in changes.items():
            setattr(profile, field, value)

        if requested_default is True:
            defaults.set_as_default(db, CompanyProfile, profile, scope)
        elif requested_default is False and profile.is_default:
            raise ValidationError("Set another company profile as default instead of unsetting the default")
        db.flush()
        defaults.verify_single_default(db, CompanyProfile, scope)
    db.refresh(profile)
    return profile


def set_default_company_profile(db: Session, user_id: int, profile_id: int) -> CompanyProfile:
    with unit_of_work(db):
        lock_user(db, user_id)
        profile = lock_row(db, CompanyProfile, profile_id, "Company profile")
        if profile.user_id != user_id:
            raise ValidationError("Company profile does not belong to this user")
        scope = _scope(user_id)
        defaults.set_as_default(db, CompanyProfile, profile, scope)
        defaults.verify_single_default(db, CompanyProfile, scope)
    db.refresh(profile)
    return profile
