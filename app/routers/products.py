# app/routers/products.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.models.user import User
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ProductCreate,
    ProductList,
    ProductRead,
    ProductUpdate,
    ProductUpdated,
)
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Public endpoints --------


@router.get("", response_model=ProductList)
def list_products(
    session: Session = Depends(get_session),
    collection: str | None = None,
    size: str | None = None,
    color: str | None = None,
    gender: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    sort_by: str | None = None,
    search: str | None = None,
    category: str | None = None,
    material: str | None = None,
    brand: str | None = None,
    limit: str | None = None,
):
    """
    List products with optional query filters.

    - Public endpoint.
    - material, brand and size accept comma-separated values.
    - sort_by: priceAsc | priceDesc | popularity
    """
    products = service.list_products(
        session,
        collection=collection,
        category=category,
        material=material,
        brand=brand,
        size=size,
        color=color,
        gender=gender,
        min_price=min_price,
        max_price=max_price,
        search=search,
        sort_by=sort_by,
        limit=limit,
    )
    return {"success": True, "count": len(products), "products": products}


@router.get("/{product_id}", response_model=ProductRead)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id.

    - Public endpoint.
    """
    return service.get_product(session, product_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    """
    Create a new product (admin only). The admin is recorded as creator.
    """
    return service.create_product(session, payload, creator_id=admin.id)


@router.put(
    "/{product_id}",
    response_model=ProductUpdated,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Update an existing product (admin only). Only sent fields change.
    """
    product = service.update_product(session, product_id, payload)
    return {"message": "Product updated successfully", "product": product}


@router.delete(
    "/{product_id}",
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
) -> dict[str, str]:
    """
    Delete a product (admin only).
    """
    service.delete_product(session, product_id)
    return {"message": "Product deleted successfully"}
