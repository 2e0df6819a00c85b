# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Storefront account.

    Role:
      - "customer" | "admin"
      - guests are represented by the absence of a token; they only
        ever own guest carts and never get a row here.

    Passwords are stored as bcrypt hashes only.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=50,
        description="Customer display name",
    )

    email: str = Field(
        unique=True,
        index=True,
        description="Login email (stored lowercase)",
    )

    password_hash: str = Field(
        description="bcrypt hash of the user's password",
    )

    # Application role
    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | admin",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
