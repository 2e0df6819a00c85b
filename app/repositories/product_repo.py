# app/repositories/product_repo.py
import uuid
from dataclasses import dataclass, field

from sqlmodel import Session, col, or_, select

from app.database import store_errors
from app.models.product import Product


@dataclass
class ProductFilter:
    """
    Parsed listing filters. Empty / None fields do not filter.

    sizes / colors / materials / brands are any-of matches.
    """

    collection: str | None = None
    category: str | None = None
    gender: str | None = None
    materials: list[str] = field(default_factory=list)
    brands: list[str] = field(default_factory=list)
    sizes: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    min_price: float | None = None
    max_price: float | None = None
    search: str | None = None


def escape_like(term: str) -> str:
    """Make %, _ and the escape char itself match literally in LIKE."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


SORT_COLUMNS = {
    "priceAsc": col(Product.price).asc(),
    "priceDesc": col(Product.price).desc(),
    "popularity": col(Product.rating).desc(),
}


class ProductRepository:
    """
    Data access layer for Product.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        with store_errors(session, "load product"):
            return session.get(Product, product_id)

    def get_by_sku(self, session: Session, sku: str) -> Product | None:
        stmt = select(Product).where(Product.sku == sku)
        with store_errors(session, "load product"):
            return session.exec(stmt).first()

    def search(
        self,
        session: Session,
        filters: ProductFilter,
        sort_by: str | None = None,
        limit: int = 20,
    ) -> list[Product]:
        """
        Filtered product listing.

        Scalar filters run in SQL. Membership in the JSON list columns
        (sizes, colors) is checked in Python, since JSON containment is
        not portable across backends; `limit` is applied afterwards.
        """
        stmt = select(Product)

        if filters.collection:
            stmt = stmt.where(Product.collections == filters.collection)
        if filters.category:
            stmt = stmt.where(Product.category == filters.category)
        if filters.gender:
            stmt = stmt.where(Product.gender == filters.gender)
        if filters.materials:
            stmt = stmt.where(col(Product.material).in_(filters.materials))
        if filters.brands:
            stmt = stmt.where(col(Product.brand).in_(filters.brands))
        if filters.min_price is not None:
            stmt = stmt.where(Product.price >= filters.min_price)
        if filters.max_price is not None:
            stmt = stmt.where(Product.price <= filters.max_price)
        if filters.search:
            pattern = f"%{escape_like(filters.search)}%"
            stmt = stmt.where(
                or_(
                    col(Product.name).ilike(pattern, escape="\\"),
                    col(Product.description).ilike(pattern, escape="\\"),
                )
            )

        if sort_by in SORT_COLUMNS:
            stmt = stmt.order_by(SORT_COLUMNS[sort_by])

        with store_errors(session, "list products"):
            rows = session.exec(stmt).all()

        results: list[Product] = []
        for product in rows:
            if filters.sizes and not set(filters.sizes) & set(product.sizes):
                continue
            if filters.colors and not set(filters.colors) & set(product.colors):
                continue
            results.append(product)
            if len(results) >= limit:
                break
        return results

    def create(self, session: Session, product: Product) -> Product:
        with store_errors(session, "create product"):
            session.add(product)
            session.commit()
            session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        with store_errors(session, "update product"):
            session.add(product)
            session.commit()
            session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        with store_errors(session, "delete product"):
            session.delete(product)
            session.commit()

    def delete_all(self, session: Session) -> None:
        with store_errors(session, "delete products"):
            for row in session.exec(select(Product)).all():
                session.delete(row)
            session.commit()
