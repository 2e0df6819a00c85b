# app/services/cart_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.errors import InvalidInputError, NotFoundError
from app.models.cart import Cart, CartOwner, GuestOwner, LineItem, LineKey, UserOwner
from app.repositories.cart_repo import CartRepository
from app.schemas.cart import CartRead
from app.services import cart_lines
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)


def new_guest_id() -> str:
    return f"guest_{uuid.uuid4().hex}"


def resolve_owner(user_id: uuid.UUID | None, guest_id: str | None) -> CartOwner | None:
    """
    Map request identity to a cart owner.

    An authenticated user always wins over a client-supplied guest id.
    Returns None when the caller supplied neither.
    """
    if user_id is not None:
        return UserOwner(user_id)
    if guest_id:
        return GuestOwner(guest_id)
    return None


def require_owner(user_id: uuid.UUID | None, guest_id: str | None) -> CartOwner:
    """
    Raises:
        InvalidInputError: if neither a user nor a guest id is present.
    """
    owner = resolve_owner(user_id, guest_id)
    if owner is None:
        raise InvalidInputError("Either a user token or a guest_id is required")
    return owner


class CartService:
    """
    Cart consolidation engine.

    Responsibilities:
      - carts addressed by owner (user or guest), created on first add
      - line items unique per (product, size, color)
      - price/name/image snapshot taken from the catalog at add time
      - total_price recomputed on every mutation (via Cart.set_lines)
      - guest -> user merge on login

    Each operation is one read-modify-write of a single cart row; there
    is no locking, so two overlapping writes to the same cart can lose
    an update.
    """

    def __init__(self, cart_repo: CartRepository, catalog: ProductService):
        self.cart_repo = cart_repo
        self.catalog = catalog

    # ---- internal helpers ----

    def _get_existing(self, session: Session, owner: CartOwner) -> Cart:
        cart = self.cart_repo.get_by_owner(session, owner)
        if cart is None:
            raise NotFoundError("Cart not found")
        return cart

    # ---- public operations ----

    def resolve(self, session: Session, owner: CartOwner) -> Cart | None:
        return self.cart_repo.get_by_owner(session, owner)

    def get_cart(self, session: Session, owner: CartOwner) -> CartRead:
        """
        Return the owner's cart, or an empty representation when the
        owner has no cart yet.
        """
        cart = self.resolve(session, owner)
        if cart is None:
            return CartRead.empty(owner)
        return CartRead.from_cart(cart)

    def add_item(
        self,
        session: Session,
        owner: CartOwner | None,
        product_id: uuid.UUID,
        quantity: int,
        size: str | None = None,
        color: str | None = None,
    ) -> tuple[CartRead, bool]:
        """
        Add `quantity` of a product variant to the owner's cart.

        - owner None => a new guest cart with a generated guest id
        - an existing line with the same (product, size, color) is
          incremented; otherwise a new snapshot line is appended

        Returns:
            (updated cart, whether the cart was created by this call)

        Raises:
            InvalidInputError: quantity <= 0
            NotFoundError: product does not exist
        """
        if quantity <= 0:
            raise InvalidInputError("Quantity must be greater than zero")

        snapshot = self.catalog.find_snapshot(session, product_id)

        if owner is None:
            owner = GuestOwner(new_guest_id())

        cart = self.cart_repo.get_by_owner(session, owner)
        created = cart is None
        if created:
            cart = Cart()
            cart.set_owner(owner)

        line = LineItem(
            product_id=snapshot.product_id,
            name=snapshot.name,
            image=snapshot.image,
            price=snapshot.price,
            size=size,
            color=color,
            quantity=quantity,
        )
        cart.set_lines(cart_lines.upsert_line(cart.lines, line))
        cart = self.cart_repo.save(session, cart)

        if created:
            logger.info("Created cart %s for %s", cart.id, owner)
        return CartRead.from_cart(cart), created

    def update_item_quantity(
        self,
        session: Session,
        owner: CartOwner,
        product_id: uuid.UUID,
        quantity: int,
        size: str | None = None,
        color: str | None = None,
    ) -> CartRead:
        """
        Set the absolute quantity of a line. quantity <= 0 removes it.

        Raises:
            NotFoundError: cart or line item absent.
        """
        cart = self._get_existing(session, owner)
        key = LineKey(product_id, size, color)
        try:
            lines = cart_lines.set_quantity(cart.lines, key, quantity)
        except KeyError:
            raise NotFoundError("Product not found in cart")

        cart.set_lines(lines)
        return CartRead.from_cart(self.cart_repo.save(session, cart))

    def remove_item(
        self,
        session: Session,
        owner: CartOwner,
        product_id: uuid.UUID,
        size: str | None = None,
        color: str | None = None,
    ) -> CartRead:
        """
        Raises:
            NotFoundError: cart or line item absent.
        """
        cart = self._get_existing(session, owner)
        key = LineKey(product_id, size, color)
        try:
            lines = cart_lines.remove_line(cart.lines, key)
        except KeyError:
            raise NotFoundError("Product not found in cart")

        cart.set_lines(lines)
        return CartRead.from_cart(self.cart_repo.save(session, cart))

    def clear_cart(self, session: Session, owner: CartOwner) -> CartRead:
        """
        Remove every line item; the (now empty) cart is kept.
        """
        cart = self._get_existing(session, owner)
        cart.set_lines([])
        return CartRead.from_cart(self.cart_repo.save(session, cart))

    def merge_guest_into_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        guest_id: str,
    ) -> CartRead:
        """
        Fold a guest cart into the authenticated user's cart.

        `user_id` must come from the verified token, never from the
        request body.

        Cases:
          - guest cart empty: user cart returned unchanged (or an empty
            representation); the empty guest cart is deleted
          - user has no cart: the guest cart row is re-keyed to the user
          - otherwise: key-based union (quantities summed), user cart
            saved, then the guest cart deleted

        The guest cart is only deleted after the user cart was saved;
        a failed save leaves both carts as they were.

        Raises:
            NotFoundError: guest cart does not exist.
        """
        user_owner = UserOwner(user_id)
        guest_cart = self._get_existing(session, GuestOwner(guest_id))
        user_cart = self.cart_repo.get_by_owner(session, user_owner)

        if not guest_cart.items:
            self.cart_repo.delete(session, guest_cart)
            logger.info("Discarded empty guest cart %s", guest_id)
            if user_cart is None:
                return CartRead.empty(user_owner)
            return CartRead.from_cart(user_cart)

        if user_cart is None:
            guest_cart.set_owner(user_owner)
            cart = self.cart_repo.save(session, guest_cart)
            logger.info("Guest cart %s re-keyed to user %s", guest_id, user_id)
            return CartRead.from_cart(cart)

        user_cart.set_lines(cart_lines.merge_lines(user_cart.lines, guest_cart.lines))
        user_cart = self.cart_repo.save(session, user_cart)
        self.cart_repo.delete(session, guest_cart)
        logger.info("Merged guest cart %s into user %s", guest_id, user_id)
        return CartRead.from_cart(user_cart)
