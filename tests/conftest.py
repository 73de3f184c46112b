from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api_service import app
from app.dependencies import get_db, get_identity_client, get_token_verifier
from tests.fakes import FakeFirestore, FakeIdentity
from tests.helpers import day


@pytest.fixture
def db():
    fake = FakeFirestore()
    fake.seed("users", "owner-1", {"role": "PHARMACY", "email": "owner@patika.hu", "name": "Kovács Anna"})
    fake.seed("users", "owner-2", {"role": "PHARMACY", "email": "other@patika.hu", "name": "Nagy Béla"})
    fake.seed("users", "sub-1", {"role": "SUBSTITUTE", "email": "sub@mail.hu", "name": "Szabó Éva"})
    fake.seed("pharmacies", "ph-1", {
        "userId": "owner-1",
        "name": "Központi Patika",
        "address": {"zip": "1051", "city": "Budapest", "street": "Fő utca 1.", "region": "Budapest"},
        "phone": "+36 1 111 1111",
        "email": None,
        "createdAt": day(-30),
    })
    fake.seed("pharmacies", "ph-2", {
        "userId": "owner-2",
        "name": "Alma Patika",
        "address": {"zip": "6720", "city": "Szeged", "street": "Kárász u. 2.", "region": "Csongrád-Csanád"},
        "phone": "+36 62 222 222",
        "email": "alma@patika.hu",
        "createdAt": day(-20),
    })
    fake.seed("substitutes", "sub-1", {
        "userId": "sub-1",
        "name": "Szabó Éva",
        "qualification": "GYÓGYSZERÉSZ",
        "experienceYears": 4,
        "availableRegions": ["Budapest", "Pest"],
        "bio": "",
        "isOpenToWork": True,
    })
    return fake


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def client(db, identity):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_identity_client] = lambda: identity
    # Bearer token is the uid itself.
    app.dependency_overrides[get_token_verifier] = lambda: (lambda token: {"user_id": token})
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
