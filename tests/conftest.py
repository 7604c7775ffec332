# File: tests/conftest.py

import json
from datetime import date

import pytest
from fastapi.testclient import TestClient

from freshlink.api.deps import get_insight_generator, get_profile_store, get_user_store
from freshlink.db.profile_store import ProfileStore
from freshlink.db.user_store import UserStore
from freshlink.main import app
from freshlink.services.insight_service import InsightGenerator

TODAY = date(2025, 3, 10)

OFFERS = [
    {
        "id": "offer-1",
        "zip": "07030",
        "storeName": "Harbor Greens",
        "category": "Produce",
        "description": "Leafy greens trio",
        "discountPercent": 20,
        "validThrough": "2025-03-15",
        "items": ["Spinach", "Kale"],
        "type": "bundle",
    },
    {
        "id": "offer-2",
        "zip": "07030",
        "storeName": "Maple Market",
        "category": "Protein",
        "description": "Tofu markdown",
        "discountPercent": 10,
        "validThrough": "2025-03-12",
        "items": ["Tofu"],
        "type": "markdown",
    },
    {
        "id": "offer-3",
        "zip": "10001",
        "storeName": "Uptown Foods",
        "category": "Bakery",
        "description": "Bread bundle",
        "discountPercent": 15,
        "validThrough": "2025-03-20",
        "items": ["Sourdough"],
        "type": "bundle",
    },
]


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path


@pytest.fixture
def user_store(data_dir):
    return UserStore(data_dir)


class Clock:
    """Settable stand-in for date.today."""

    def __init__(self, today=TODAY):
        self.today = today

    def __call__(self):
        return self.today


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def profile_store(data_dir, clock):
    return ProfileStore(data_dir, today=clock)


@pytest.fixture
def seed_offers(data_dir):
    (data_dir / "store-offers.json").write_text(json.dumps(OFFERS), encoding="utf-8")
    return OFFERS


@pytest.fixture
def insight_generator():
    return InsightGenerator(client=None)


@pytest.fixture
def client(user_store, profile_store, insight_generator):
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    app.dependency_overrides[get_insight_generator] = lambda: insight_generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def signup(client):
    """Register an account through the API and return the auth response body."""

    def _signup(role="buyer", email=None, display_name="Ada"):
        resp = client.post(
            "/api/v1/auth/signup",
            json={
                "email": email or f"{display_name.lower()}-{role}@example.com",
                "password": "secret123",
                "role": role,
                "displayName": display_name,
            },
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _signup
