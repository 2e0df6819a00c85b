# app/services/product_service.py
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlmodel import Session

from app.core.config import get_settings
from app.core.errors import InvalidInputError, NotFoundError
from app.models.product import Product
from app.repositories.product_repo import ProductFilter, ProductRepository
from app.schemas.product import ProductCreate, ProductUpdate

settings = get_settings()

# Nullable product fields an update may reset by sending null
CLEARABLE_FIELDS = {"discount_price", "brand", "material", "gender", "dimensions", "weight"}


@dataclass(frozen=True)
class ProductSnapshot:
    """
    Catalog fields copied into a cart line at add time.
    """

    product_id: uuid.UUID
    name: str
    price: float
    image: str


def _split_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _unless_all(raw: str | None) -> str | None:
    """`all` (any case) means no filter."""
    if not raw or raw.lower() == "all":
        return None
    return raw


def _parse_limit(raw: str | None) -> int:
    try:
        value = int(raw) if raw is not None else 0
    except ValueError:
        value = 0
    return value if value > 0 else settings.DEFAULT_PRODUCT_LIMIT


class ProductService:
    """
    Business logic for Product.

    Responsibilities:
      - query-string to filter translation for listing
      - SKU uniqueness
      - catalog lookups for the cart (snapshot fields)
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ----- Catalog contract used by the cart -----

    def find_snapshot(self, session: Session, product_id: uuid.UUID) -> ProductSnapshot:
        """
        Raises:
            NotFoundError: if the product does not exist.
        """
        product = self.get_product(session, product_id)
        return ProductSnapshot(
            product_id=product.id,
            name=product.name,
            price=product.price,
            image=product.primary_image_url,
        )

    # ----- Products -----

    def list_products(
        self,
        session: Session,
        *,
        collection: str | None = None,
        category: str | None = None,
        material: str | None = None,
        brand: str | None = None,
        size: str | None = None,
        color: str | None = None,
        gender: str | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        limit: str | None = None,
    ) -> list[Product]:
        """
        Filtered listing.

        - collection / category: exact match, "all" disables the filter
        - material / brand / size: comma-separated, any-of
        - color: single color contained in the product's colors
        - min_price / max_price: inclusive
        - search: case-insensitive substring of name or description
        - sort_by: priceAsc | priceDesc | popularity (else unsorted)
        """
        filters = ProductFilter(
            collection=_unless_all(collection),
            category=_unless_all(category),
            gender=gender or None,
            materials=_split_csv(material),
            brands=_split_csv(brand),
            sizes=_split_csv(size),
            colors=[color] if color else [],
            min_price=min_price,
            max_price=max_price,
            search=search or None,
        )
        return self.repo.search(session, filters, sort_by=sort_by, limit=_parse_limit(limit))

    def get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def _ensure_unique_sku(
        self,
        session: Session,
        sku: str,
        product_id: uuid.UUID | None = None,
    ) -> None:
        existing = self.repo.get_by_sku(session, sku)
        if existing is not None and existing.id != product_id:
            raise InvalidInputError("SKU already in use")

    def create_product(
        self,
        session: Session,
        payload: ProductCreate,
        creator_id: uuid.UUID,
    ) -> Product:
        self._ensure_unique_sku(session, payload.sku)
        product = Product(**payload.model_dump(), user_id=creator_id)
        return self.repo.create(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> Product:
        """
        Partial update of a product: only fields present in the request
        body are applied.
        """
        product = self.get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("sku") is not None:
            self._ensure_unique_sku(session, changes["sku"], product.id)

        for name, value in changes.items():
            if value is None and name not in CLEARABLE_FIELDS:
                continue
            setattr(product, name, value)
        product.updated_at = datetime.now(timezone.utc)

        return self.repo.update(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        product = self.get_product(session, product_id)
        self.repo.delete(session, product)
