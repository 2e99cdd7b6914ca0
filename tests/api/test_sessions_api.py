"""Tests for edit session API endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient


def _select(client: TestClient, session_id: str, attribute_id: str, value_id: str):
    return client.post(
        f"/edit-sessions/{session_id}/attributes/{attribute_id}/values",
        json={"value_id": value_id},
    )


class TestOpenSession:
    """Tests for POST /edit-sessions endpoint."""

    def test_open_session(self, client: TestClient) -> None:
        """Should open a session for a new product."""
        response = client.post(
            "/edit-sessions",
            json={"product_id": "prod-1", "base_price": {"amount": 2500}, "sku": "TSHIRT"},
        )
        assert response.status_code == 201
        data = response.json()

        assert data["product_id"] == "prod-1"
        assert data["base_price"] == {"amount": 2500, "currency": "USD"}
        assert data["sku"] == "TSHIRT"
        assert data["variants"] == []
        assert data["variants_visible"] is False
        assert data["hidden_reason"] == "no_variant_attributes"
        assert "created_at" in data

    def test_open_session_negative_price(self, client: TestClient) -> None:
        """Should reject a negative base price."""
        response = client.post(
            "/edit-sessions",
            json={"product_id": "prod-1", "base_price": {"amount": -1}},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "NEGATIVE_MONEY"

    def test_open_session_requires_product(self, client: TestClient) -> None:
        """Should reject an empty product ID."""
        response = client.post(
            "/edit-sessions",
            json={"product_id": "", "base_price": {"amount": 100}},
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "product_id"


class TestGetSession:
    """Tests for GET /edit-sessions/{session_id} endpoint."""

    def test_get_session(self, client: TestClient, session_id: str) -> None:
        """Should return the session state."""
        response = client.get(f"/edit-sessions/{session_id}")
        assert response.status_code == 200
        assert response.json()["id"] == session_id

    def test_get_session_not_found(self, client: TestClient) -> None:
        """Should return 404 with the error envelope."""
        response = client.get("/edit-sessions/missing")
        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["details"] == [{"field": "session_id", "message": "missing"}]
        assert "request_id" in data


class TestSelection:
    """Tests for selection endpoints."""

    def test_select_values_generates_variants(self, client: TestClient, session_id: str) -> None:
        """Should regenerate variants on each value selection."""
        _select(client, session_id, "attr-color", "val-red")
        _select(client, session_id, "attr-color", "val-blue")
        response = _select(client, session_id, "attr-size", "val-size-s")

        assert response.status_code == 200
        data = response.json()
        assert [v["name"] for v in data["variants"]] == [
            "Color: Red, Size: S",
            "Color: Blue, Size: S",
        ]
        assert [v["sku"] for v in data["variants"]] == ["TSHIRT-1", "TSHIRT-2"]
        assert data["variant_attribute_ids"] == ["attr-color", "attr-size"]
        assert data["combination_count"] == 2
        assert data["variants_visible"] is True

    def test_select_attribute(self, client: TestClient, session_id: str) -> None:
        """Should add an attribute without values."""
        response = client.post(
            f"/edit-sessions/{session_id}/attributes",
            json={"attribute_id": "attr-material"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["selection"] == {"attr-material": []}
        assert data["specification_attribute_ids"] == ["attr-material"]

    def test_select_unknown_attribute(self, client: TestClient, session_id: str) -> None:
        """Should return 404 for attributes not in the catalog."""
        response = client.post(
            f"/edit-sessions/{session_id}/attributes",
            json={"attribute_id": "attr-ghost"},
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "ATTRIBUTE_NOT_FOUND"

    def test_select_unknown_value(self, client: TestClient, session_id: str) -> None:
        """Should return 404 for values not in the catalog."""
        response = _select(client, session_id, "attr-color", "val-ghost")
        assert response.status_code == 404
        assert response.json()["error_code"] == "ATTRIBUTE_VALUE_NOT_FOUND"

    def test_select_value_of_other_attribute(self, client: TestClient, session_id: str) -> None:
        """Should return 422 when the value belongs elsewhere."""
        response = _select(client, session_id, "attr-color", "val-size-s")
        assert response.status_code == 422
        assert response.json()["error_code"] == "ATTRIBUTE_VALUE_MISMATCH"

    def test_deselect_value_and_attribute(self, client: TestClient, session_id: str) -> None:
        """Should prune variants on deselection."""
        _select(client, session_id, "attr-color", "val-red")
        _select(client, session_id, "attr-color", "val-blue")

        response = client.delete(
            f"/edit-sessions/{session_id}/attributes/attr-color/values/val-blue"
        )
        assert [v["name"] for v in response.json()["variants"]] == ["Color: Red"]

        response = client.delete(f"/edit-sessions/{session_id}/attributes/attr-color")
        assert response.json()["variants"] == []
        assert response.json()["selection"] == {}


class TestUpdateVariant:
    """Tests for PATCH /edit-sessions/{id}/variants/{variant_id} endpoint."""

    def test_update_variant(self, client: TestClient, session_id: str) -> None:
        """Should apply overrides."""
        _select(client, session_id, "attr-color", "val-red")
        response = client.patch(
            f"/edit-sessions/{session_id}/variants/variant-1",
            json={"price": {"amount": 1999}, "stock_quantity": 5, "sku": "RED-TEE"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["price"] == {"amount": 1999, "currency": "USD"}
        assert data["stock_quantity"] == 5
        assert data["sku"] == "RED-TEE"

    def test_overrides_survive_adding_attribute(self, client: TestClient, session_id: str) -> None:
        """Should keep overrides when another attribute is added."""
        _select(client, session_id, "attr-color", "val-red")
        client.patch(
            f"/edit-sessions/{session_id}/variants/variant-1",
            json={"price": {"amount": 1999}},
        )
        response = _select(client, session_id, "attr-size", "val-size-m")

        variant = response.json()["variants"][0]
        assert variant["id"] == "variant-1"
        assert variant["name"] == "Color: Red, Size: M"
        assert variant["price"]["amount"] == 1999

    def test_update_unknown_variant(self, client: TestClient, session_id: str) -> None:
        """Should return 404 for unknown variants."""
        response = client.patch(
            f"/edit-sessions/{session_id}/variants/variant-9",
            json={"stock_quantity": 1},
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "VARIANT_NOT_FOUND"

    def test_negative_stock(self, client: TestClient, session_id: str) -> None:
        """Should return 422 for negative stock."""
        _select(client, session_id, "attr-color", "val-red")
        response = client.patch(
            f"/edit-sessions/{session_id}/variants/variant-1",
            json={"stock_quantity": -2},
        )
        assert response.status_code == 422
        assert response.json()["error_code"] == "INVALID_STOCK_QUANTITY"


class TestUpdateProduct:
    """Tests for PUT /edit-sessions/{id}/product endpoint."""

    def test_update_product(self, client: TestClient, session_id: str) -> None:
        """Should apply the new base price to new variants."""
        response = client.put(
            f"/edit-sessions/{session_id}/product",
            json={"base_price": {"amount": 3000, "currency": "eur"}},
        )
        assert response.status_code == 200
        assert response.json()["base_price"] == {"amount": 3000, "currency": "EUR"}

        data = _select(client, session_id, "attr-color", "val-red").json()
        assert data["variants"][0]["price"] == {"amount": 3000, "currency": "EUR"}


class TestSaveSession:
    """Tests for POST /edit-sessions/{id}/save endpoint."""

    def test_save_and_reopen(self, client: TestClient, session_id: str) -> None:
        """Should persist variants that a new session loads."""
        _select(client, session_id, "attr-color", "val-red")
        _select(client, session_id, "attr-material", "val-cotton")
        client.patch(
            f"/edit-sessions/{session_id}/variants/variant-1",
            json={"stock_quantity": 12},
        )

        response = client.post(f"/edit-sessions/{session_id}/save")
        assert response.status_code == 200
        data = response.json()
        assert data["variant_count"] == 1
        assert data["link_count"] == 1
        assert data["assignment_count"] == 2
        assert data["session"]["is_dirty"] is False

        reopened = client.post(
            "/edit-sessions",
            json={"product_id": "prod-1", "base_price": {"amount": 2500}},
        ).json()
        assert reopened["selection"] == {
            "attr-color": ["val-red"],
            "attr-material": ["val-cotton"],
        }
        assert reopened["variants"][0]["id"] == "variant-1"
        assert reopened["variants"][0]["stock_quantity"] == 12

    def test_save_failure(self, client: TestClient, session_id: str) -> None:
        """Should return 502 and keep the session when the store fails."""
        _select(client, session_id, "attr-color", "val-red")

        with patch(
            "storefront.catalog.memory.InMemoryVariantStore.replace_variants",
            new=AsyncMock(side_effect=RuntimeError("disk full")),
        ):
            response = client.post(f"/edit-sessions/{session_id}/save")

        assert response.status_code == 502
        assert response.json()["error_code"] == "VARIANT_SAVE_FAILED"

        state = client.get(f"/edit-sessions/{session_id}").json()
        assert state["last_save_error"] == "disk full"
        assert state["is_dirty"] is True
        assert len(state["variants"]) == 1

    def test_save_not_found(self, client: TestClient) -> None:
        """Should return 404 for unknown sessions."""
        response = client.post("/edit-sessions/missing/save")
        assert response.status_code == 404


class TestCloseSession:
    """Tests for DELETE /edit-sessions/{id} endpoint."""

    def test_close_session(self, client: TestClient, session_id: str) -> None:
        """Should discard the session."""
        response = client.delete(f"/edit-sessions/{session_id}")
        assert response.status_code == 204

        response = client.get(f"/edit-sessions/{session_id}")
        assert response.status_code == 404
