import pytest

from backend.app.core.exceptions import ConsistencyError, ReferencedEntityError, ValidationError
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.client import Client
from backend.app.models.company_profile import CompanyProfile
from backend.app.models.user import User
from backend.app.schemas.client import ClientUpdate
from backend.app.schemas.company_profile import CompanyProfileCreate, CompanyProfileUpdate
from backend.app.schemas.invoice import InvoiceCreate
from backend.app.services.clients import update_client
from backend.app.services.company_profiles import (
    create_company_profile,
    get_default_company_profile,
    set_default_company_profile,
    update_company_profile,
)
from backend.app.services.integrity import delete_company_profile
from backend.app.services.invoices import create_invoice


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create_user(db, email="owner@example.com"):
    user = User(email=email, hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _defaults(db, user_id):
    return [
        profile.id
        for profile in db.query(CompanyProfile).filter(CompanyProfile.user_id == user_id).all()
        if profile.is_default
    ]


def test_first_profile_is_forced_default():
    db = SessionLocal()
    try:
        user = _create_user(db)
        first = create_company_profile(db, user.id, CompanyProfileCreate(name="A", is_default=False))
        second = create_company_profile(db, user.id, CompanyProfileCreate(name="B"))
        assert first.is_default is True
        assert second.is_default is False
        assert _defaults(db, user.id) == [first.id]
    finally:
        db.close()


def test_creating_default_clears_previous_default():
    db = SessionLocal()
    try:
        user = _create_user(db)
        first = create_company_profile(db, user.id, CompanyProfileCreate(name="A"))
        second = create_company_profile(db, user.id, CompanyProfileCreate(name="B", is_default=True))
        assert _defaults(db, user.id) == [second.id]
        db.refresh(first)
        assert first.is_default is False
    finally:
        db.close()


def test_set_default_moves_flag_and_is_scoped_per_user():
    db = SessionLocal()
    try:
        user = _create_user(db)
        other = _create_user(db, "other@example.com")
        a = create_company_profile(db, user.id, CompanyProfileCreate(name="A"))
        b = create_company_profile(db, user.id, CompanyProfileCreate(name="B"))
        theirs = create_company_profile(db, other.id, CompanyProfileCreate(name="Theirs"))

        set_default_company_profile(db, user.id, b.id)
        assert _defaults(db, user.id) == [b.id]
        assert _defaults(db, other.id) == [theirs.id]
        assert get_default_company_profile(db, user.id).id == b.id

        with pytest.raises(ValidationError):
            set_default_company_profile(db, user.id, theirs.id)
        db.refresh(a)
        assert a.is_default is False
    finally:
        db.close()


def test_update_with_is_default_uses_set_as_default():
    db = SessionLocal()
    try:
        user = _create_user(db)
        a = create_company_profile(db, user.id, CompanyProfileCreate(name="A"))
        b = create_company_profile(db, user.id, CompanyProfileCreate(name="B"))
        update_company_profile(db, b.id, CompanyProfileUpdate(is_default=True, city="Leeds"))
        assert _defaults(db, user.id) == [b.id]

        with pytest.raises(ValidationError):
            update_company_profile(db, b.id, CompanyProfileUpdate(is_default=False))
        assert _defaults(db, user.id) == [b.id]
        db.refresh(a)
        assert a.is_default is False
    finally:
        db.close()


def test_deleting_default_promotes_lowest_remaining_id():
    db = SessionLocal()
    try:
        user = _create_user(db)
        a = create_company_profile(db, user.id, CompanyProfileCreate(name="A"))
        b = create_company_profile(db, user.id, CompanyProfileCreate(name="B"))
        c = create_company_profile(db, user.id, CompanyProfileCreate(name="C"))
        delete_company_profile(db, a.id)
        assert _defaults(db, user.id) == [b.id]

        delete_company_profile(db, c.id)
        assert _defaults(db, user.id) == [b.id]

        delete_company_profile(db, b.id)
        assert db.query(CompanyProfile).filter(CompanyProfile.user_id == user.id).count() == 0
    finally:
        db.close()


def test_referenced_default_profile_survives_blocked_delete():
    db = SessionLocal()
    try:
        user = _create_user(db)
        a = create_company_profile(db, user.id, CompanyProfileCreate(name="A"))
        b = create_company_profile(db, user.id, CompanyProfileCreate(name="B"))
        client = Client(user_id=user.id, name="Globex")
        db.add(client)
        db.commit()

        delete_company_profile(db, a.id)
        db.refresh(b)
        assert b.is_default is True

        create_invoice(
            db,
            user.id,
            InvoiceCreate(
                company_profile_id=b.id,
                client_id=client.id,
                invoice_number="INV-1",
                country="GB",
                currency="GBP",
            ),
        )
        with pytest.raises(ReferencedEntityError, match="Cannot delete company profile that is used in invoices"):
            delete_company_profile(db, b.id)
        db.refresh(b)
        assert b.is_default is True
        assert _defaults(db, user.id) == [b.id]
    finally:
        db.close()


def test_duplicate_defaults_raise_consistency_error_and_roll_back(caplog):
    db = SessionLocal()
    try:
        user = _create_user(db)
        first = CompanyProfile(user_id=user.id, name="A", is_default=True)
        second = CompanyProfile(user_id=user.id, name="B", is_default=True)
        db.add_all([first, second])
        db.commit()

        with caplog.at_level("ERROR", logger="backend.app.services.defaults"):
            with pytest.raises(ConsistencyError):
                update_company_profile(db, second.id, CompanyProfileUpdate(name="Renamed"))
        assert "has 2 defaults" in caplog.text

        db.expire_all()
        assert db.get(CompanyProfile, second.id).name == "B"
        assert sorted(_defaults(db, user.id)) == [first.id, second.id]
    finally:
        db.close()


def test_central_repo_clients_are_read_only():
    db = SessionLocal()
    try:
        user = _create_user(db)
        shared = Client(user_id=user.id, name="Initech", is_from_central_repo=True)
        db.add(shared)
        db.commit()

        with pytest.raises(ValidationError, match="read-only"):
            update_client(db, shared.id, ClientUpdate(name="Initrode"))
        db.refresh(shared)
        assert shared.name == "Initech"
    finally:
        db.close()
