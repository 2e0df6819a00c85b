# app/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

Gender = Literal["Men", "Women", "Unisex"]


class ProductImage(BaseModel):
    url: str
    alt_text: str | None = None


class Dimensions(BaseModel):
    length: float = Field(ge=0)
    width: float = Field(ge=0)
    height: float = Field(ge=0)


class ProductCreate(SQLModel):
    """
    Payload for creating a product (admin only).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=200)
    description: str = ""
    price: float = Field(gt=0)
    discount_price: float | None = Field(default=None, ge=0)
    count_in_stock: int = Field(default=0, ge=0)
    sku: str = Field(max_length=100)
    category: str = Field(max_length=100)
    brand: str | None = None
    sizes: list[str] = []
    colors: list[str] = []
    collections: str = Field(max_length=100)
    material: str | None = None
    gender: Gender | None = None
    images: list[ProductImage] = []
    is_featured: bool = False
    is_published: bool = False
    tags: list[str] = []
    dimensions: Dimensions | None = None
    weight: float | None = Field(default=None, ge=0)

    @field_validator("name", "sku", "category", "collections")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional; only fields that were sent are applied.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    discount_price: float | None = Field(default=None, ge=0)
    count_in_stock: int | None = Field(default=None, ge=0)
    sku: str | None = Field(default=None, max_length=100)
    category: str | None = None
    brand: str | None = None
    sizes: list[str] | None = None
    colors: list[str] | None = None
    collections: str | None = None
    material: str | None = None
    gender: Gender | None = None
    images: list[ProductImage] | None = None
    is_featured: bool | None = None
    is_published: bool | None = None
    tags: list[str] | None = None
    dimensions: Dimensions | None = None
    weight: float | None = Field(default=None, ge=0)

    @field_validator("name", "sku", "category", "collections")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str
    price: float
    discount_price: float | None = None
    count_in_stock: int
    sku: str
    category: str
    brand: str | None = None
    sizes: list[str]
    colors: list[str]
    collections: str
    material: str | None = None
    gender: str | None = None
    images: list[ProductImage]
    is_featured: bool
    is_published: bool
    rating: float
    num_reviews: int
    tags: list[str]
    dimensions: Dimensions | None = None
    weight: float | None = None
    user_id: uuid.UUID | None = None
    created_at: datetime
    updated_at: datetime


class ProductList(SQLModel):
    success: bool = True
    count: int
    products: list[ProductRead]


class ProductUpdated(SQLModel):
    message: str
    product: ProductRead
