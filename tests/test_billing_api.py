import pytest
from fastapi.testclient import TestClient

from backend.app.core.seed import seed_reference_data
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.company_profile import CompanyProfile
from backend.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str = "secret123") -> dict:
    client.post("/auth/register", json={"email": email, "password": password})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def create_parties(client: TestClient, headers: dict):
    profile = client.post("/company-profiles/", json={"name": "Acme Ltd"}, headers=headers)
    assert profile.status_code == 201
    customer = client.post("/clients/", json={"name": "Globex"}, headers=headers)
    assert customer.status_code == 201
    return profile.json(), customer.json()


def create_invoice(client: TestClient, headers: dict, profile: dict, customer: dict, number: str = "INV-001"):
    return client.post(
        "/invoices/",
        json={
            "company_profile_id": profile["id"],
            "client_id": customer["id"],
            "invoice_number": number,
            "country": "GB",
            "currency": "GBP",
        },
        headers=headers,
    )


def test_invoice_totals_through_api():
    client = TestClient(app)
    headers = register_and_login(client, "api@example.com")
    profile, customer = create_parties(client, headers)
    assert profile["is_default"] is True

    invoice = create_invoice(client, headers, profile, customer).json()
    client.post(
        f"/invoices/{invoice['id']}/items",
        json={"description": "Widgets", "quantity": "2", "unit_price": "10.00"},
        headers=headers,
    )
    client.post(
        f"/invoices/{invoice['id']}/items",
        json={"description": "Bolts", "quantity": "1", "unit_price": "5.00", "discount": "10"},
        headers=headers,
    )

    response = client.get(f"/invoices/{invoice['id']}", headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert [float(item["amount"]) for item in data["items"]] == [20.0, 4.5]
    assert float(data["subtotal"]) == 24.5
    assert float(data["tax"]) == 4.9
    assert float(data["total"]) == 29.4


def test_totals_are_not_writable_through_api():
    client = TestClient(app)
    headers = register_and_login(client, "readonly@example.com")
    profile, customer = create_parties(client, headers)
    invoice = create_invoice(client, headers, profile, customer).json()
    response = client.patch(f"/invoices/{invoice['id']}", json={"total": "1000.00"}, headers=headers)
    assert response.status_code == 422


def test_invalid_discount_maps_to_400():
    client = TestClient(app)
    headers = register_and_login(client, "discount@example.com")
    profile, customer = create_parties(client, headers)
    invoice = create_invoice(client, headers, profile, customer).json()
    response = client.post(
        f"/invoices/{invoice['id']}/items",
        json={"description": "Widgets", "quantity": "1", "unit_price": "10.00", "discount": "120"},
        headers=headers,
    )
    assert response.status_code == 400
    assert response.json()["code"] == "validation_error"


def test_other_users_invoice_is_not_found():
    client = TestClient(app)
    owner = register_and_login(client, "owner@example.com")
    intruder = register_and_login(client, "intruder@example.com")
    profile, customer = create_parties(client, owner)
    invoice = create_invoice(client, owner, profile, customer).json()

    response = client.get(f"/invoices/{invoice['id']}", headers=intruder)
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"
    assert client.delete(f"/clients/{customer['id']}", headers=intruder).status_code == 404


def test_quota_exceeded_maps_to_403():
    client = TestClient(app)
    headers = register_and_login(client, "quota@example.com")
    profile, customer = create_parties(client, headers)
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "quota@example.com").first()
        user.invoices_used = user.invoice_quota
        db.commit()

    response = create_invoice(client, headers, profile, customer)
    assert response.status_code == 403
    assert response.json()["code"] == "quota_exceeded"


def test_referenced_client_delete_maps_to_409():
    client = TestClient(app)
    headers = register_and_login(client, "ref@example.com")
    profile, customer = create_parties(client, headers)
    create_invoice(client, headers, profile, customer)

    response = client.delete(f"/clients/{customer['id']}", headers=headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "Cannot delete client that is used in invoices"
    assert client.get(f"/clients/{customer['id']}", headers=headers).status_code == 200


def test_default_profile_promotion_through_api():
    client = TestClient(app)
    headers = register_and_login(client, "profiles@example.com")
    first, _ = create_parties(client, headers)
    second = client.post("/company-profiles/", json={"name": "Acme Two"}, headers=headers).json()
    assert second["is_default"] is False

    assert client.delete(f"/company-profiles/{first['id']}", headers=headers).status_code == 204
    default = client.get("/company-profiles/default", headers=headers).json()
    assert default["id"] == second["id"]


def test_quotation_conversion_through_api():
    client = TestClient(app)
    headers = register_and_login(client, "quote@example.com")
    profile, customer = create_parties(client, headers)
    quotation = client.post(
        "/quotations/",
        json={
            "company_profile_id": profile["id"],
            "client_id": customer["id"],
            "quote_number": "Q-7",
            "country": "GB",
            "currency": "GBP",
        },
        headers=headers,
    ).json()
    client.post(
        f"/quotations/{quotation['id']}/items",
        json={"description": "Survey", "quantity": "1", "unit_price": "250.00"},
        headers=headers,
    )

    response = client.post(f"/quotations/{quotation['id']}/convert", headers=headers)
    assert response.status_code == 201
    invoice = response.json()
    assert invoice["quotation_id"] == quotation["id"]
    assert float(invoice["total"]) == 300.0
    assert client.get(f"/quotations/{quotation['id']}", headers=headers).json()["status"] == "accepted"

    usage = client.get("/subscriptions/usage", headers=headers).json()
    assert (usage["invoices_used"], usage["quotes_used"]) == (1, 1)


def test_subscription_unlocks_premium_templates():
    client = TestClient(app)
    headers = register_and_login(client, "plans@example.com")
    free_templates = client.get("/templates", headers=headers).json()
    assert all(not template["is_premium"] for template in free_templates)

    plans = client.get("/subscriptions/plans").json()
    assert {plan["id"] for plan in plans} == {"free", "monthly", "yearly", "per-invoice"}

    response = client.post("/subscriptions/subscribe", json={"plan_id": "yearly"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["invoice_quota"] == -1
    assert len(client.get("/templates", headers=headers).json()) == 6

    missing = client.post("/subscriptions/subscribe", json={"plan_id": "platinum"}, headers=headers)
    assert missing.status_code == 404


def test_catalog_and_terms_through_api():
    client = TestClient(app)
    headers = register_and_login(client, "catalog@example.com")
    masters = client.get("/materials/master", params={"category": "Service"}, headers=headers).json()
    assert {item["code"] for item in masters} == {"SRV-001", "SRV-002", "SRV-003"}

    copied = client.post(
        "/materials",
        json={
            "master_item_id": masters[0]["id"],
            "name": masters[0]["name"],
            "description": masters[0]["description"],
            "category": "Service",
            "unit_of_measure": masters[0]["unit_of_measure"],
            "price": "90.00",
        },
        headers=headers,
    )
    assert copied.status_code == 201
    history = client.get("/subscriptions/material-usage", headers=headers).json()
    assert [row["master_item_id"] for row in history] == [masters[0]["id"]]

    term = client.post(
        "/terms",
        json={"category": "Payment", "title": "Net 30", "content": "Pay within 30 days."},
        headers=headers,
    ).json()
    assert term["is_default"] is True
    rejected = client.patch(f"/terms/{term['id']}", json={"is_default": False}, headers=headers)
    assert rejected.status_code == 400


def test_tax_rates_lookup():
    client = TestClient(app)
    response = client.get("/tax-rates/de")
    assert response.status_code == 200
    assert float(response.json()[0]["rate"]) == 19.0
    assert client.get("/tax-rates/zz").status_code == 404


def test_duplicate_defaults_map_to_500():
    client = TestClient(app)
    headers = register_and_login(client, "broken@example.com")
    profile, _ = create_parties(client, headers)

    db = SessionLocal()
    try:
        owner = db.query(User).filter(User.email == "broken@example.com").first()
        db.add(CompanyProfile(user_id=owner.id, name="Stray default", is_default=True))
        db.commit()
    finally:
        db.close()

    response = client.patch(f"/company-profiles/{profile['id']}", json={"name": "Renamed"}, headers=headers)
    assert response.status_code == 500
    assert response.json()["code"] == "consistency_error"
    assert client.get(f"/company-profiles/{profile['id']}", headers=headers).json()["name"] == "Acme Ltd"
