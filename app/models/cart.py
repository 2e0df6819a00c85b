# app/models/cart.py
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, NamedTuple

from sqlalchemy import JSON, CheckConstraint, Column
from sqlmodel import SQLModel, Field


# ---- Ownership ----


@dataclass(frozen=True)
class UserOwner:
    """Cart owned by an authenticated account."""

    user_id: uuid.UUID


@dataclass(frozen=True)
class GuestOwner:
    """Cart keyed by a client-supplied (unauthenticated) guest id."""

    guest_id: str


CartOwner = UserOwner | GuestOwner


# ---- Line items ----


class LineKey(NamedTuple):
    """Uniqueness key of a line item within one cart."""

    product_id: uuid.UUID
    size: str | None
    color: str | None


@dataclass
class LineItem:
    """
    One product + variant entry in a cart.

    name, image and price are snapshots taken from the catalog when the
    line was first added; they are not refreshed afterwards.
    """

    product_id: uuid.UUID
    name: str
    image: str
    price: float
    size: str | None
    color: str | None
    quantity: int

    @property
    def key(self) -> LineKey:
        return LineKey(self.product_id, self.size, self.color)

    @property
    def line_total(self) -> float:
        return self.quantity * self.price

    def to_document(self) -> dict[str, Any]:
        doc = asdict(self)
        doc["product_id"] = str(self.product_id)
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "LineItem":
        return cls(
            product_id=uuid.UUID(str(doc["product_id"])),
            name=doc.get("name", ""),
            image=doc.get("image", ""),
            price=float(doc["price"]),
            size=doc.get("size"),
            color=doc.get("color"),
            quantity=int(doc["quantity"]),
        )


def lines_total(lines: list[LineItem]) -> float:
    return sum(line.line_total for line in lines)


# ---- Cart document ----


class Cart(SQLModel, table=True):
    """
    Shopping cart, stored as one row per cart.

    Owner:
      - exactly one of user_id / guest_id is set (CHECK constraint);
        use `owner` / `set_owner` rather than the raw columns.

    Items:
      - the line items live in a JSON column so that every cart
        mutation is a single-row write.
      - total_price always equals sum(quantity * price); it is only
        ever written through `set_lines`.
    """

    __tablename__ = "carts"
    __table_args__ = (
        CheckConstraint(
            "(user_id IS NULL) <> (guest_id IS NULL)",
            name="ck_carts_single_owner",
        ),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="users.id",
        unique=True,
        index=True,
    )

    guest_id: str | None = Field(
        default=None,
        unique=True,
        index=True,
        max_length=100,
    )

    items: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    total_price: float = Field(default=0, ge=0)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )

    @property
    def owner(self) -> CartOwner:
        if self.user_id is not None:
            return UserOwner(self.user_id)
        return GuestOwner(self.guest_id)

    def set_owner(self, owner: CartOwner) -> None:
        if isinstance(owner, UserOwner):
            self.user_id = owner.user_id
            self.guest_id = None
        else:
            self.user_id = None
            self.guest_id = owner.guest_id

    @property
    def lines(self) -> list[LineItem]:
        return [LineItem.from_document(doc) for doc in self.items]

    def set_lines(self, lines: list[LineItem]) -> None:
        # Reassign (never mutate in place) so SQLAlchemy sees the change.
        self.items = [line.to_document() for line in lines]
        self.total_price = lines_total(lines)
        self.updated_at = datetime.now(timezone.utc)
