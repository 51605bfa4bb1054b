import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def test_successful_registration_returns_user():
    client = TestClient(app)
    payload = {"email": "user@example.com", "password": "secret123", "full_name": "Ada Lovelace"}
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == payload["email"]
    assert data["full_name"] == "Ada Lovelace"
    assert data["plan_id"] == "free"
    assert "password" not in data
    assert "hashed_password" not in data
    assert isinstance(data.get("id"), int)


def test_duplicate_email_returns_400():
    client = TestClient(app)
    payload = {"email": "dup@example.com", "password": "secret123"}
    first = client.post("/auth/register", json=payload)
    assert first.status_code == 200
    second = client.post("/auth/register", json=payload)
    assert second.status_code == 400
    assert second.json()["detail"] == "Email already registered"


def test_short_password_returns_400():
    client = TestClient(app)
    response = client.post("/auth/register", json={"email": "short@example.com", "password": "abc"})
    assert response.status_code == 400


def test_user_persisted_with_free_plan_quotas():
    client = TestClient(app)
    payload = {"email": "persist@example.com", "password": "secret123"}
    response = client.post("/auth/register", json=payload)
    assert response.status_code == 200

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == payload["email"]).first()
        assert user is not None
        assert user.hashed_password and user.hashed_password != payload["password"]
        assert (user.invoice_quota, user.quote_quota) == (10, 5)
        assert (user.invoices_used, user.quotes_used, user.material_records_used) == (0, 0, 0)
        assert user.subscription_status == "active"
