"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from storefront.main import app


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset in-memory repositories before each test."""
    import storefront.application.editing_service as editing_service

    editing_service._session_repo = None
    editing_service._attribute_catalog = None
    editing_service._variant_store = None
    yield
    editing_service._session_repo = None
    editing_service._attribute_catalog = None
    editing_service._variant_store = None


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def session_id(client: TestClient) -> str:
    """Open a session for a product with nothing saved."""
    response = client.post(
        "/edit-sessions",
        json={"product_id": "prod-1", "base_price": {"amount": 2500}, "sku": "TSHIRT"},
    )
    assert response.status_code == 201
    return response.json()["id"]
