# app/repositories/cart_repo.py
from sqlmodel import Session, select

from app.database import store_errors
from app.models.cart import Cart, CartOwner, UserOwner


class CartRepository:
    """
    Document-style access to carts.

    - One row per cart, items in a JSON column: every save is a
      single-row atomic write.
    - No cross-row transactions: callers that touch two carts
      (merge) commit them one after the other.
    - SQLAlchemy failures surface as PersistenceError.
    """

    def get_by_owner(self, session: Session, owner: CartOwner) -> Cart | None:
        if isinstance(owner, UserOwner):
            stmt = select(Cart).where(Cart.user_id == owner.user_id)
        else:
            stmt = select(Cart).where(Cart.guest_id == owner.guest_id)
        with store_errors(session, "load cart"):
            return session.exec(stmt).first()

    def save(self, session: Session, cart: Cart) -> Cart:
        """Insert or update a cart and return the persisted row."""
        with store_errors(session, "save cart"):
            session.add(cart)
            session.commit()
            session.refresh(cart)
        return cart

    def delete(self, session: Session, cart: Cart) -> None:
        with store_errors(session, "delete cart"):
            session.delete(cart)
            session.commit()

    def delete_all(self, session: Session) -> None:
        with store_errors(session, "delete carts"):
            for row in session.exec(select(Cart)).all():
                session.delete(row)
            session.commit()
