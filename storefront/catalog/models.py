"""SQLAlchemy models for the attribute catalog and product variants.

Defines the attribute, attribute value, product variant and assignment
tables used by the database storage backend.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from storefront.domain.entities import Attribute, AttributeType, AttributeValue, Variant
from storefront.domain.value_objects import Combination, Money
from storefront.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AttributeModel(Base):
    """Attribute definition.

    Attributes:
        id: Attribute identifier.
        name: Display name.
        slug: Unique URL-safe name.
        type: Input type.
        description: Optional description.
        is_variant_attribute: Whether values produce variants.
        sort_order: Catalog ordering.
        is_active: Whether the attribute is offered.
    """

    __tablename__ = "attributes"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="select")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_variant_attribute: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    values: Mapped[list["AttributeValueModel"]] = relationship(
        "AttributeValueModel",
        back_populates="attribute",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<AttributeModel(id={self.id}, name={self.name})>"

    def to_entity(self) -> Attribute:
        """Convert to domain entity."""
        return Attribute(
            id=self.id,
            name=self.name,
            slug=self.slug,
            type=AttributeType(self.type),
            is_variant_attribute=self.is_variant_attribute,
            sort_order=self.sort_order,
            is_active=self.is_active,
        )


class AttributeValueModel(Base):
    """Permissible value of an attribute."""

    __tablename__ = "attribute_values"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    attribute_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("attributes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(String(200), nullable=False)
    display_value: Mapped[str | None] = mapped_column(String(200), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    attribute: Mapped["AttributeModel"] = relationship(
        "AttributeModel", back_populates="values"
    )

    def to_entity(self) -> AttributeValue:
        """Convert to domain entity."""
        return AttributeValue(
            id=self.id,
            attribute_id=self.attribute_id,
            value=self.value,
            display_value=self.display_value,
            sort_order=self.sort_order,
            is_active=self.is_active,
        )


class ProductVariantModel(Base):
    """Persisted variant of a product.

    Variant ids are minted per editing session, so the primary key is
    scoped by product.

    Attributes:
        product_id: Owning product.
        id: Variant identifier.
        position: Index in the saved variant list.
        name: Derived variant name.
        sku: Stock Keeping Unit.
        price_cents: Price in cents.
        currency: Currency code.
        stock_quantity: Units in stock.
        attributes: Raw attribute id to value map.
    """

    __tablename__ = "product_variants"

    product_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    sku: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attributes: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductVariantModel(id={self.id}, name={self.name})>"

    def to_entity(self) -> Variant:
        """Convert to domain entity."""
        return Variant(
            id=self.id,
            name=self.name,
            attributes=Combination.of(self.attributes or {}),
            price=Money(amount_cents=self.price_cents, currency=self.currency),
            stock_quantity=self.stock_quantity,
            sku=self.sku,
        )


class VariantAttributeAssignmentModel(Base):
    """Link between a variant and a variant attribute value."""

    __tablename__ = "variant_attribute_assignments"
    __table_args__ = (
        ForeignKeyConstraint(
            ["product_id", "variant_id"],
            ["product_variants.product_id", "product_variants.id"],
            ondelete="CASCADE",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    product_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    variant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    attribute_id: Mapped[str] = mapped_column(String(36), nullable=False)
    attribute_value_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("attribute_values.id", ondelete="CASCADE"),
        nullable=False,
    )


class ProductAttributeAssignmentModel(Base):
    """Attribute value assigned to a product."""

    __tablename__ = "product_attribute_assignments"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid4())
    )
    product_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    attribute_value_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("attribute_values.id", ondelete="CASCADE"),
        nullable=False,
    )
