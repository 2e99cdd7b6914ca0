"""Tests for the database-backed catalog and variant store.

The session factory is mocked, so these tests check the statements and
rows handed to SQLAlchemy rather than a real database.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.catalog.models import (
    AttributeModel,
    AttributeValueModel,
    ProductAttributeAssignmentModel,
    ProductVariantModel,
    VariantAttributeAssignmentModel,
)
from storefront.catalog.repository import SqlAttributeCatalog, SqlVariantStore
from storefront.domain import AttributeType, Money
from storefront.engine import (
    ProductAttributeAssignment,
    Projection,
    SaveSnapshot,
    VariantAttributeLink,
    VariantRow,
)


def _mock_factory(scalars: list | None = None) -> tuple[MagicMock, MagicMock]:
    """Create a session factory whose sessions return the given scalars."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = scalars or []

    session = MagicMock()
    session.execute = AsyncMock(return_value=result)
    session.flush = AsyncMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)

    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin.return_value = transaction

    factory = MagicMock(return_value=session)
    return factory, session


class TestModels:
    """Tests for model to entity conversion."""

    def test_attribute_to_entity(self) -> None:
        """Attribute rows convert to Attribute entities."""
        model = AttributeModel(
            id="attr-color",
            name="Color",
            slug="color",
            type="color",
            is_variant_attribute=True,
            sort_order=1,
            is_active=True,
        )
        entity = model.to_entity()
        assert entity.id == "attr-color"
        assert entity.type == AttributeType.COLOR
        assert entity.is_variant_attribute

    def test_value_to_entity(self) -> None:
        """Value rows convert to AttributeValue entities."""
        model = AttributeValueModel(
            id="val-red",
            attribute_id="attr-color",
            value="Red",
            display_value=None,
            sort_order=1,
            is_active=True,
        )
        assert model.to_entity().label == "Red"

    def test_variant_to_entity(self) -> None:
        """Variant rows convert to Variant entities."""
        model = ProductVariantModel(
            product_id="prod-1",
            id="variant-1",
            position=0,
            name="Color: Red",
            sku="TSHIRT-1",
            price_cents=1999,
            currency="USD",
            stock_quantity=4,
            attributes={"attr-color": "Red"},
        )
        variant = model.to_entity()
        assert variant.id == "variant-1"
        assert variant.price == Money(1999)
        assert variant.stock_quantity == 4
        assert variant.attributes.to_dict() == {"attr-color": "Red"}


class TestSqlAttributeCatalog:
    """Tests for SqlAttributeCatalog."""

    @pytest.mark.asyncio
    async def test_list_attributes(self) -> None:
        """Rows are converted to entities."""
        rows = [
            AttributeModel(
                id="attr-size",
                name="Size",
                slug="size",
                type="size",
                is_variant_attribute=True,
                sort_order=2,
                is_active=True,
            )
        ]
        factory, session = _mock_factory(rows)

        attributes = await SqlAttributeCatalog(factory).list_attributes()

        assert [a.id for a in attributes] == ["attr-size"]
        session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_values(self) -> None:
        """Value rows are converted to entities."""
        rows = [
            AttributeValueModel(
                id="val-size-s", attribute_id="attr-size", value="S", sort_order=1, is_active=True
            )
        ]
        factory, _ = _mock_factory(rows)

        values = await SqlAttributeCatalog(factory).list_values("attr-size")

        assert [v.value for v in values] == ["S"]

    @pytest.mark.asyncio
    async def test_list_values_ties_follow_creation_time(self) -> None:
        """Values sharing a sort order are ordered by creation time."""
        factory, session = _mock_factory()

        await SqlAttributeCatalog(factory).list_values("attr-size")

        query = session.execute.call_args.args[0]
        assert "ORDER BY attribute_values.sort_order, attribute_values.created_at" in str(query)


class TestSqlVariantStore:
    """Tests for SqlVariantStore."""

    @pytest.mark.asyncio
    async def test_load_product_value_ids(self) -> None:
        """Assignment value ids are returned as a list."""
        factory, _ = _mock_factory(["val-red", "val-cotton"])
        value_ids = await SqlVariantStore(factory).load_product_value_ids("prod-1")
        assert value_ids == ["val-red", "val-cotton"]

    @pytest.mark.asyncio
    async def test_replace_variants(self) -> None:
        """Existing rows are deleted and new rows added in one transaction."""
        factory, session = _mock_factory()
        snapshot = SaveSnapshot(
            session_version=3,
            product_id="prod-1",
            projection=Projection(
                variant_rows=(
                    VariantRow("variant-1", "Color: Red", "R", 2500, "USD", 2, {"attr-color": "Red"}),
                    VariantRow("variant-2", "Color: Blue", "B", 2500, "USD", 0, {"attr-color": "Blue"}),
                ),
                variant_attribute_links=(
                    VariantAttributeLink("variant-1", "attr-color", "val-red"),
                    VariantAttributeLink("variant-2", "attr-color", "val-blue"),
                ),
            ),
            assignments=(
                ProductAttributeAssignment("attr-color", "val-red"),
                ProductAttributeAssignment("attr-color", "val-blue"),
            ),
        )

        await SqlVariantStore(factory).replace_variants(snapshot)

        session.begin.assert_called_once()
        # Links, variants, product assignments
        assert session.execute.await_count == 3
        session.flush.assert_awaited_once()

        added = [obj for call in session.add_all.call_args_list for obj in call.args[0]]
        variants = [o for o in added if isinstance(o, ProductVariantModel)]
        links = [o for o in added if isinstance(o, VariantAttributeAssignmentModel)]
        assignments = [o for o in added if isinstance(o, ProductAttributeAssignmentModel)]

        assert [(v.id, v.position) for v in variants] == [("variant-1", 0), ("variant-2", 1)]
        assert all(v.product_id == "prod-1" for v in variants)
        assert [link.attribute_value_id for link in links] == ["val-red", "val-blue"]
        assert [(a.attribute_value_id, a.position) for a in assignments] == [
            ("val-red", 0),
            ("val-blue", 1),
        ]

    @pytest.mark.asyncio
    async def test_replace_with_empty_list_still_deletes(self) -> None:
        """An empty variant list clears stored rows."""
        factory, session = _mock_factory()
        snapshot = SaveSnapshot(session_version=1, product_id="prod-1", projection=Projection())

        await SqlVariantStore(factory).replace_variants(snapshot)

        assert session.execute.await_count == 3
        added = [obj for call in session.add_all.call_args_list for obj in call.args[0]]
        assert added == []
