import pytest
from decimal import Decimal

from backend.app.core.exceptions import NotFoundError, ValidationError
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.client import Client
from backend.app.models.company_profile import CompanyProfile
from backend.app.models.invoice import Invoice
from backend.app.models.invoice_item import InvoiceItem
from backend.app.models.tax_rate import TaxRate
from backend.app.models.user import User
from backend.app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from backend.app.schemas.invoice_item import InvoiceItemCreate, InvoiceItemUpdate
from backend.app.schemas.quotation import QuotationCreate, QuotationItemCreate
from backend.app.services.invoices import (
    create_invoice,
    create_invoice_item,
    delete_invoice,
    delete_invoice_item,
    get_invoices,
    import_invoice_items,
    update_invoice,
    update_invoice_item,
)
from backend.app.services.quotations import create_quotation, create_quotation_item


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _seed_owner(db, email="owner@example.com"):
    user = User(email=email, hashed_password="x")
    db.add(user)
    db.commit()
    db.refresh(user)
    profile = CompanyProfile(user_id=user.id, name="Acme Ltd", is_default=True)
    client = Client(user_id=user.id, name="Globex")
    db.add_all([profile, client])
    db.commit()
    return user, profile, client


def _seed_tax(db):
    db.add(TaxRate(country="United Kingdom", country_code="GB", name="VAT", rate=Decimal("20.00"), is_default=True))
    db.add(TaxRate(country="Germany", country_code="DE", name="VAT", rate=Decimal("19.00"), is_default=True))
    db.commit()


def _invoice_payload(profile, client, **overrides):
    data = {
        "company_profile_id": profile.id,
        "client_id": client.id,
        "invoice_number": "INV-001",
        "country": "GB",
        "currency": "GBP",
    }
    data.update(overrides)
    return InvoiceCreate(**data)


def _item(description="Consulting", quantity="1", unit_price="100.00", discount="0"):
    return InvoiceItemCreate(
        description=description,
        quantity=Decimal(quantity),
        unit_price=Decimal(unit_price),
        discount=Decimal(discount),
    )


def test_create_invoice_starts_with_zero_totals_and_counts_usage():
    db = SessionLocal()
    try:
        _seed_tax(db)
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        assert invoice.subtotal == Decimal("0.00")
        assert invoice.total == Decimal("0.00")
        assert invoice.tax_rate == Decimal("20.00")
        assert invoice.invoice_date is not None
        db.refresh(user)
        assert user.invoices_used == 1
    finally:
        db.close()


def test_create_invoice_rejects_foreign_profile_and_client():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        other, other_profile, other_client = _seed_owner(db, "other@example.com")
        with pytest.raises(ValidationError, match="Invalid company profile"):
            create_invoice(db, user.id, _invoice_payload(other_profile, client))
        with pytest.raises(ValidationError, match="Invalid client"):
            create_invoice(db, user.id, _invoice_payload(profile, other_client))
        db.refresh(user)
        assert user.invoices_used == 0
        assert db.query(Invoice).count() == 0
    finally:
        db.close()


def test_central_repo_client_can_be_invoiced():
    db = SessionLocal()
    try:
        user, profile, _ = _seed_owner(db)
        other, _, _ = _seed_owner(db, "central@example.com")
        shared = Client(user_id=other.id, name="Initech", is_from_central_repo=True)
        db.add(shared)
        db.commit()
        invoice = create_invoice(db, user.id, _invoice_payload(profile, shared))
        assert invoice.client_id == shared.id
    finally:
        db.close()


def test_item_update_without_amount_fields_keeps_totals():
    db = SessionLocal()
    try:
        _seed_tax(db)
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        item = create_invoice_item(db, invoice.id, _item())
        db.refresh(invoice)
        before = (invoice.subtotal, invoice.tax, invoice.total)

        updated = update_invoice_item(db, item.id, InvoiceItemUpdate(description="Advisory"))
        assert updated.description == "Advisory"
        db.refresh(invoice)
        assert (invoice.subtotal, invoice.tax, invoice.total) == before
    finally:
        db.close()


def test_item_update_with_amount_fields_recomputes():
    db = SessionLocal()
    try:
        _seed_tax(db)
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        item = create_invoice_item(db, invoice.id, _item())

        updated = update_invoice_item(db, item.id, InvoiceItemUpdate(quantity=Decimal("3"), discount=Decimal("50")))
        assert updated.amount == Decimal("150.00")
        db.refresh(invoice)
        assert invoice.subtotal == Decimal("150.00")
        assert invoice.tax == Decimal("30.00")
        assert invoice.total == Decimal("180.00")
    finally:
        db.close()


def test_rejected_item_update_changes_nothing():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        item = create_invoice_item(db, invoice.id, _item())
        with pytest.raises(ValidationError):
            update_invoice_item(db, item.id, InvoiceItemUpdate(discount=Decimal("150")))
        db.refresh(item)
        assert item.discount == Decimal("0.00")
        assert item.amount == Decimal("100.00")
    finally:
        db.close()


def test_document_discount_and_country_changes_recompute():
    db = SessionLocal()
    try:
        _seed_tax(db)
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        create_invoice_item(db, invoice.id, _item())

        invoice = update_invoice(db, invoice.id, InvoiceUpdate(discount=Decimal("10.00")))
        assert invoice.subtotal == Decimal("100.00")
        assert invoice.tax == Decimal("18.00")
        assert invoice.total == Decimal("108.00")

        invoice = update_invoice(db, invoice.id, InvoiceUpdate(country="DE"))
        assert invoice.tax_rate == Decimal("19.00")
        assert invoice.tax == Decimal("17.10")
        assert invoice.total == Decimal("107.10")
    finally:
        db.close()


def test_update_invoice_cannot_clear_required_fields():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        with pytest.raises(ValidationError):
            update_invoice(db, invoice.id, InvoiceUpdate(client_id=None))
    finally:
        db.close()


def test_delete_item_recomputes_totals():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        keep = create_invoice_item(db, invoice.id, _item(unit_price="40.00"))
        drop = create_invoice_item(db, invoice.id, _item(unit_price="60.00"))
        delete_invoice_item(db, drop.id)

        db.refresh(invoice)
        assert invoice.subtotal == Decimal("40.00")
        assert [row.id for row in invoice.items] == [keep.id]
    finally:
        db.close()


def test_import_is_all_or_nothing():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        rows = [_item("A", unit_price="10.00"), _item("B", unit_price="-1.00")]
        with pytest.raises(ValidationError):
            import_invoice_items(db, invoice.id, rows)
        assert db.query(InvoiceItem).count() == 0

        created = import_invoice_items(db, invoice.id, [_item("A", unit_price="10.00"), _item("B", unit_price="5.00")])
        assert [item.description for item in created] == ["A", "B"]
        db.refresh(invoice)
        assert invoice.subtotal == Decimal("15.00")
    finally:
        db.close()


def test_item_for_missing_invoice_is_not_found():
    db = SessionLocal()
    try:
        with pytest.raises(NotFoundError):
            create_invoice_item(db, 999, _item())
    finally:
        db.close()


def test_delete_invoice_removes_items_and_keeps_usage():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))
        create_invoice_item(db, invoice.id, _item())
        delete_invoice(db, invoice.id)

        assert db.query(InvoiceItem).count() == 0
        assert get_invoices(db, user.id) == []
        db.refresh(user)
        assert user.invoices_used == 1
    finally:
        db.close()


def test_item_cannot_link_another_users_quotation_item():
    db = SessionLocal()
    try:
        user, profile, client = _seed_owner(db)
        other, other_profile, other_client = _seed_owner(db, "other@example.com")
        quotation = create_quotation(
            db,
            other.id,
            QuotationCreate(
                company_profile_id=other_profile.id,
                client_id=other_client.id,
                quote_number="Q-100",
                country="GB",
                currency="GBP",
            ),
        )
        source = create_quotation_item(
            db, quotation.id, QuotationItemCreate(description="Survey", quantity=Decimal("1"), unit_price=Decimal("80.00"))
        )
        invoice = create_invoice(db, user.id, _invoice_payload(profile, client))

        row = InvoiceItemCreate(description="Survey", quantity=Decimal("1"), unit_price=Decimal("80.00"), quotation_item_id=source.id)
        with pytest.raises(ValidationError, match="Invalid quotation item"):
            create_invoice_item(db, invoice.id, row)
        assert db.query(InvoiceItem).count() == 0
    finally:
        db.close()
