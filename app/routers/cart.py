# app/routers/cart.py
from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session

from app.core.auth import get_current_user, require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemDelete,
    CartItemUpdate,
    CartMerge,
    CartRead,
)
from app.services.cart_service import CartService, require_owner, resolve_owner
from app.services.product_service import ProductService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
catalog = ProductService(ProductRepository())
service = CartService(cart_repo, catalog)


def _user_id(user: User | None):
    return user.id if user is not None else None


@router.get("", response_model=CartRead)
def get_cart(
    guest_id: str | None = None,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Get the caller's cart.

    Auth:
      - With a bearer token: the user's cart.
      - Without: the guest cart for `?guest_id=`.
    """
    owner = require_owner(_user_id(current_user), guest_id)
    return service.get_cart(session, owner)


@router.post(
    "",
    response_model=CartRead,
    responses={201: {"description": "Cart created"}},
)
def add_to_cart(
    payload: CartItemCreate,
    response: Response,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Add a product variant to the cart of a guest or logged-in user.

    A guest without a guest_id gets a new guest cart; the generated id is
    returned in the response and must be sent on later calls.
    Answers 201 when the cart was created, 200 otherwise.
    """
    owner = resolve_owner(_user_id(current_user), payload.guest_id)
    cart, created = service.add_item(
        session,
        owner,
        product_id=payload.product_id,
        quantity=payload.quantity,
        size=payload.size,
        color=payload.color,
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return cart


@router.put("", response_model=CartRead)
def update_cart_item(
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Set the quantity of a line item. quantity <= 0 removes the line.
    """
    owner = require_owner(_user_id(current_user), payload.guest_id)
    return service.update_item_quantity(
        session,
        owner,
        product_id=payload.product_id,
        quantity=payload.quantity,
        size=payload.size,
        color=payload.color,
    )


@router.delete("", response_model=CartRead)
def remove_cart_item(
    payload: CartItemDelete,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Remove a line item from the cart.
    """
    owner = require_owner(_user_id(current_user), payload.guest_id)
    return service.remove_item(
        session,
        owner,
        product_id=payload.product_id,
        size=payload.size,
        color=payload.color,
    )


@router.delete("/items", response_model=CartRead)
def clear_cart(
    guest_id: str | None = None,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Remove every line item from the cart.
    """
    owner = require_owner(_user_id(current_user), guest_id)
    return service.clear_cart(session, owner)


@router.post("/merge", response_model=CartRead)
def merge_cart(
    payload: CartMerge,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Merge a guest cart into the authenticated user's cart (on login).

    Auth:
      - Requires a valid bearer token; the target is always the
        token's user.
    """
    return service.merge_guest_into_user(session, current_user.id, payload.guest_id)
