"""Database-backed attribute catalog and variant store.

Each call opens its own session from the factory; ``replace_variants``
runs its deletes and inserts in a single transaction.
"""

from collections.abc import Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.catalog.models import (
    AttributeModel,
    AttributeValueModel,
    ProductAttributeAssignmentModel,
    ProductVariantModel,
    VariantAttributeAssignmentModel,
)
from storefront.domain.entities import Attribute, AttributeValue, Variant
from storefront.engine.session import SaveSnapshot

logger = structlog.get_logger()


class SqlAttributeCatalog:
    """Attribute catalog read from the attributes tables.

    Example usage:
        catalog = SqlAttributeCatalog(get_session_factory())
        attributes = await catalog.list_attributes()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize catalog.

        Args:
            session_factory: Factory producing async sessions.
        """
        self.session_factory = session_factory

    async def list_attributes(self) -> Sequence[Attribute]:
        """List active attributes ordered by sort order, then name."""
        query = (
            select(AttributeModel)
            .where(AttributeModel.is_active.is_(True))
            .order_by(AttributeModel.sort_order, AttributeModel.name)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [model.to_entity() for model in result.scalars().all()]

    async def list_values(self, attribute_id: str) -> Sequence[AttributeValue]:
        """List active values of an attribute ordered by sort order, then creation time."""
        query = (
            select(AttributeValueModel)
            .where(
                AttributeValueModel.attribute_id == attribute_id,
                AttributeValueModel.is_active.is_(True),
            )
            .order_by(AttributeValueModel.sort_order, AttributeValueModel.created_at)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [model.to_entity() for model in result.scalars().all()]


class SqlVariantStore:
    """Variant store persisting to the product variant tables.

    Example usage:
        store = SqlVariantStore(get_session_factory())
        await store.replace_variants(snapshot)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store.

        Args:
            session_factory: Factory producing async sessions.
        """
        self.session_factory = session_factory

    async def load_variants(self, product_id: str) -> Sequence[Variant]:
        """Load persisted variants in their saved order."""
        query = (
            select(ProductVariantModel)
            .where(
                ProductVariantModel.product_id == product_id,
                ProductVariantModel.is_active.is_(True),
            )
            .order_by(ProductVariantModel.position)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [model.to_entity() for model in result.scalars().all()]

    async def load_product_value_ids(self, product_id: str) -> Sequence[str]:
        """Load attribute value ids assigned to the product, in saved order."""
        query = (
            select(ProductAttributeAssignmentModel.attribute_value_id)
            .where(ProductAttributeAssignmentModel.product_id == product_id)
            .order_by(ProductAttributeAssignmentModel.position)
        )
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def replace_variants(self, snapshot: SaveSnapshot) -> None:
        """Replace all variant rows, links and assignments of a product.

        An empty variant list still deletes the existing rows.

        Args:
            snapshot: Write set to persist.
        """
        product_id = snapshot.product_id
        rows = snapshot.projection.variant_rows
        links = snapshot.projection.variant_attribute_links

        async with self.session_factory() as session, session.begin():
            await session.execute(
                delete(VariantAttributeAssignmentModel).where(
                    VariantAttributeAssignmentModel.product_id == product_id
                )
            )
            await session.execute(
                delete(ProductVariantModel).where(
                    ProductVariantModel.product_id == product_id
                )
            )
            await session.execute(
                delete(ProductAttributeAssignmentModel).where(
                    ProductAttributeAssignmentModel.product_id == product_id
                )
            )

            session.add_all(
                [
                    ProductVariantModel(
                        product_id=product_id,
                        id=row.id,
                        position=position,
                        name=row.name,
                        sku=row.sku,
                        price_cents=row.price_cents,
                        currency=row.currency,
                        stock_quantity=row.stock_quantity,
                        attributes=dict(row.attributes),
                    )
                    for position, row in enumerate(rows)
                ]
            )
            # Variant rows must exist before their links
            await session.flush()
            session.add_all(
                [
                    VariantAttributeAssignmentModel(
                        product_id=product_id,
                        variant_id=link.variant_id,
                        attribute_id=link.attribute_id,
                        attribute_value_id=link.attribute_value_id,
                    )
                    for link in links
                ]
            )
            session.add_all(
                [
                    ProductAttributeAssignmentModel(
                        product_id=product_id,
                        position=position,
                        attribute_value_id=assignment.attribute_value_id,
                    )
                    for position, assignment in enumerate(snapshot.assignments)
                ]
            )

        logger.info(
            "Variants persisted",
            product_id=product_id,
            variant_count=len(rows),
            link_count=len(links),
            assignment_count=len(snapshot.assignments),
        )
