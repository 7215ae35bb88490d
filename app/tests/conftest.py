import os

# settings are read once at import time; pin them before the app loads
os.environ["DATABASE_URL"] = os.getenv("TEST_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ["FRONTEND_PUBLIC_URL"] = "https://quotes.example.com"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# FORCE model registration
import app.models.user  # noqa
import app.models.quotation  # noqa

from app.db.base import Base
from app.db.session import get_db
from app.main import create_app


def _make_engine():
    url = os.environ["DATABASE_URL"]
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
    return create_engine(url, future=True)


@pytest.fixture(scope="function")
def engine():
    eng = _make_engine()
    Base.metadata.drop_all(bind=eng)
    Base.metadata.create_all(bind=eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(bind=eng)
        eng.dispose()


@pytest.fixture(scope="function")
def db_sessionmaker(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture(scope="function")
def api_app(db_sessionmaker):
    app = create_app()

    def override_get_db():
        db = db_sessionmaker()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture(scope="function")
def client(api_app):
    with TestClient(api_app) as c:
        yield c


def register(client: TestClient, email: str, name: str = "Test User") -> dict:
    r = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": "pass1234"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return {
        "id": body["data"]["id"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def owner(client):
    return register(client, "owner@example.com", "Owner")


@pytest.fixture
def stranger(client):
    return register(client, "stranger@example.com", "Stranger")


def quotation_payload(**overrides) -> dict:
    payload = {
        "customerName": "Acme Homes Ltd",
        "customerEmail": "buyer@acme.example.com",
        "customerPhone": "+44 20 7946 0000",
        "siteAddress": "Plot 4, Riverside Way",
        "jobType": ["Electric", "Water"],
        "projectTitle": "Riverside Phase 2",
        "items": [
            {
                "serviceName": "LV mains installation",
                "description": "Trenching and duct laying",
                "quantity": 2,
                "unitPrice": 1500,
                "totalPrice": 3000,
            },
            {"serviceName": "Water connection", "unitPrice": "800"},
        ],
        "subtotal": 3800,
        "vatRate": 20,
        "vatAmount": 760,
        "totalAmount": 4560,
        "exclusions": ["Traffic management"],
        "paymentTerms": "30 days",
        "hourlyRates": [{"role": "Engineer", "rate": 65}],
        "validUntil": "2026-12-31",
        "scopeTable": {"totalPlots": "42", "meters": "Smart"},
        "tenderInclusions": {"design": True, "wayleaves": False},
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_quotation(client, owner):
    def _make(headers=None, **overrides):
        r = client.post(
            "/api/quotations",
            json=quotation_payload(**overrides),
            headers=headers or owner["headers"],
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make
