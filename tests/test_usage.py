import pytest
from datetime import timedelta

from backend.app.core.exceptions import NotFoundError, QuotaExceededError, SubscriptionExpiredError
from backend.app.core.seed import seed_reference_data
from backend.app.core.time import as_utc, utc_now
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.client import Client
from backend.app.models.company_profile import CompanyProfile
from backend.app.models.invoice import Invoice
from backend.app.models.master_item import MasterItem
from backend.app.models.material_usage import MaterialUsage
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceCreate
from backend.app.services.invoices import create_invoice
from backend.app.services.usage import (
    REASON_BUNDLE_EXPIRED,
    REASON_QUOTA_EXCEEDED,
    check_invoice_quota,
    check_quote_quota,
    get_material_usage,
    get_usage_summary,
    increment_invoice_usage,
    track_material_usage,
    update_user_subscription,
)
from backend.app.services.users import change_plan


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create_user(db, **fields):
    user = User(email="owner@example.com", hashed_password="x", **fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _seed_documents_parties(db, user):
    profile = CompanyProfile(user_id=user.id, name="Acme Ltd", is_default=True)
    client = Client(user_id=user.id, name="Globex")
    db.add_all([profile, client])
    db.commit()
    return profile, client


def _invoice_payload(profile, client, number="INV-1"):
    return InvoiceCreate(
        company_profile_id=profile.id,
        client_id=client.id,
        invoice_number=number,
        country="GB",
        currency="GBP",
    )


def test_exhausted_free_quota_is_denied():
    db = SessionLocal()
    try:
        user = _create_user(db, invoice_quota=10, invoices_used=10)
        check = check_invoice_quota(db, user.id)
        assert check.allowed is False
        assert check.reason == REASON_QUOTA_EXCEEDED
    finally:
        db.close()


def test_unlimited_quota_always_allowed():
    db = SessionLocal()
    try:
        user = _create_user(db, invoice_quota=-1, invoices_used=5000)
        assert check_invoice_quota(db, user.id).allowed is True
    finally:
        db.close()


def test_quote_quota_uses_its_own_counter():
    db = SessionLocal()
    try:
        user = _create_user(db, invoice_quota=10, invoices_used=0, quote_quota=5, quotes_used=5)
        assert check_invoice_quota(db, user.id).allowed is True
        assert check_quote_quota(db, user.id).reason == REASON_QUOTA_EXCEEDED
    finally:
        db.close()


def test_per_invoice_bundle_expires():
    db = SessionLocal()
    try:
        seed_reference_data(db)
        user = _create_user(db, invoices_used=7)
        before = utc_now()
        update_user_subscription(db, user.id, "per-invoice", 10)
        db.refresh(user)

        assert user.plan_id == "per-invoice"
        assert user.invoices_used == 0
        assert user.invoice_quota == 10
        expires_at = as_utc(user.subscription_expires_at)
        assert before + timedelta(days=30) <= expires_at <= utc_now() + timedelta(days=30)

        assert check_invoice_quota(db, user.id, now=expires_at - timedelta(minutes=1)).allowed is True
        late = check_invoice_quota(db, user.id, now=expires_at + timedelta(seconds=1))
        assert late.allowed is False
        assert late.reason == REASON_BUNDLE_EXPIRED
    finally:
        db.close()


def test_subscription_change_resets_all_counters():
    db = SessionLocal()
    try:
        seed_reference_data(db)
        user = _create_user(db, invoices_used=3, quotes_used=2, material_records_used=9)
        change_plan(db, user.id, "monthly")
        db.refresh(user)
        summary = get_usage_summary(user)
        assert summary["plan_id"] == "monthly"
        assert summary["invoice_quota"] == -1
        assert summary["quote_quota"] == -1
        assert (summary["invoices_used"], summary["quotes_used"], summary["material_records_used"]) == (0, 0, 0)
        assert summary["subscription_expires_at"] is None
    finally:
        db.close()


def test_unknown_plan_is_rejected():
    db = SessionLocal()
    try:
        user = _create_user(db, invoices_used=3)
        with pytest.raises(NotFoundError):
            update_user_subscription(db, user.id, "platinum", 100)
        db.refresh(user)
        assert user.invoices_used == 3
    finally:
        db.close()


def test_counters_only_grow_between_plan_changes():
    db = SessionLocal()
    try:
        user = _create_user(db, invoice_quota=-1)
        seen = []
        for _ in range(3):
            seen.append(increment_invoice_usage(db, user.id).invoices_used)
        assert seen == [1, 2, 3]
    finally:
        db.close()


def test_quota_gate_on_invoice_creation():
    db = SessionLocal()
    try:
        user = _create_user(db, invoice_quota=2)
        profile, client = _seed_documents_parties(db, user)
        create_invoice(db, user.id, _invoice_payload(profile, client, "INV-1"))
        create_invoice(db, user.id, _invoice_payload(profile, client, "INV-2"))
        with pytest.raises(QuotaExceededError):
            create_invoice(db, user.id, _invoice_payload(profile, client, "INV-3"))

        db.refresh(user)
        assert user.invoices_used == 2
        assert db.query(Invoice).count() == 2
    finally:
        db.close()


def test_expired_bundle_blocks_invoice_creation():
    db = SessionLocal()
    try:
        user = _create_user(
            db,
            plan_id="per-invoice",
            invoice_quota=10,
            subscription_expires_at=utc_now() - timedelta(days=1),
        )
        profile, client = _seed_documents_parties(db, user)
        with pytest.raises(SubscriptionExpiredError):
            create_invoice(db, user.id, _invoice_payload(profile, client))
        db.refresh(user)
        assert user.invoices_used == 0
    finally:
        db.close()


def test_track_material_usage_logs_and_counts():
    db = SessionLocal()
    try:
        user = _create_user(db)
        item = MasterItem(code="MAT-1", name="Beam", description="Steel", category="Material", unit_of_measure="m")
        db.add(item)
        db.commit()

        track_material_usage(db, user.id, item.id)
        track_material_usage(db, user.id, item.id)
        db.refresh(user)
        assert user.material_records_used == 2
        assert len(get_material_usage(db, user.id)) == 2

        with pytest.raises(NotFoundError):
            track_material_usage(db, user.id, 999)
        db.refresh(user)
        assert user.material_records_used == 2
        assert db.query(MaterialUsage).count() == 2
    finally:
        db.close()
