# app/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.models.cart import Cart, CartOwner, LineItem, UserOwner


class CartItemKey(SQLModel):
    """
    Identifies one line item: product + variant.

    guest_id addresses a guest cart; it is ignored when the request
    carries a valid bearer token (the user's own cart is used).
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    size: str | None = Field(default=None, max_length=50)
    color: str | None = Field(default=None, max_length=50)
    guest_id: str | None = Field(default=None, max_length=100)

    @field_validator("guest_id")
    @classmethod
    def normalize_guest_id(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class CartItemCreate(CartItemKey):
    """
    Payload for adding to cart.
    """

    quantity: int = Field(gt=0)


class CartItemUpdate(CartItemKey):
    """
    Payload for setting the quantity of a cart item.

    quantity <= 0 removes the line.
    """

    quantity: int


class CartItemDelete(CartItemKey):
    """
    Payload for removing a line item.
    """


class CartMerge(SQLModel):
    """
    Merge payload. The target user always comes from the bearer token,
    so no user id is accepted here.
    """

    model_config = ConfigDict(extra="forbid")

    guest_id: str = Field(min_length=1, max_length=100)


class LineItemRead(SQLModel):
    """
    Read model for a single line item, including line_total.
    """

    product_id: uuid.UUID
    name: str
    image: str
    price: float
    size: str | None = None
    color: str | None = None
    quantity: int
    line_total: float

    @classmethod
    def from_line(cls, line: LineItem) -> "LineItemRead":
        return cls(
            product_id=line.product_id,
            name=line.name,
            image=line.image,
            price=line.price,
            size=line.size,
            color=line.color,
            quantity=line.quantity,
            line_total=line.line_total,
        )


class CartRead(SQLModel):
    """
    Full cart response model.

    id / timestamps are None for the empty representation returned
    when an owner has no stored cart yet.
    """

    id: uuid.UUID | None = None
    user_id: uuid.UUID | None = None
    guest_id: str | None = None
    items: list[LineItemRead]
    total_price: float
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_cart(cls, cart: Cart) -> "CartRead":
        return cls(
            id=cart.id,
            user_id=cart.user_id,
            guest_id=cart.guest_id,
            items=[LineItemRead.from_line(line) for line in cart.lines],
            total_price=cart.total_price,
            created_at=cart.created_at,
            updated_at=cart.updated_at,
        )

    @classmethod
    def empty(cls, owner: CartOwner) -> "CartRead":
        if isinstance(owner, UserOwner):
            return cls(user_id=owner.user_id, items=[], total_price=0)
        return cls(guest_id=owner.guest_id, items=[], total_price=0)
