# app/models/product.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Variant lists (sizes, colors, tags) and nested objects (images,
    dimensions) are stored as JSON columns, the same shape clients send.

    images: list of {"url": str, "alt_text": str | None}
    dimensions: {"length": float, "width": float, "height": float} | None
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=200,
        index=True,
        description="Display name of the product",
    )

    description: str = Field(default="")

    price: float = Field(
        gt=0,
        description="Unit price",
    )

    discount_price: float | None = Field(default=None, ge=0)

    count_in_stock: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    sku: str = Field(
        unique=True,
        index=True,
        description="Stock keeping unit (unique)",
    )

    category: str = Field(index=True)
    brand: str | None = Field(default=None, index=True)
    collections: str = Field(index=True)
    material: str | None = Field(default=None)

    # Men | Women | Unisex
    gender: str | None = Field(default=None, index=True)

    sizes: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    colors: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    images: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    dimensions: dict[str, float] | None = Field(default=None, sa_column=Column(JSON))

    is_featured: bool = Field(default=False)
    is_published: bool = Field(default=False, index=True)

    rating: float = Field(default=0, ge=0)
    num_reviews: int = Field(default=0, ge=0)

    weight: float | None = Field(default=None, ge=0)

    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        description="Admin who created the product",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def primary_image_url(self) -> str:
        """URL of the first image, or empty string when there is none."""
        if self.images:
            return self.images[0].get("url") or ""
        return ""
