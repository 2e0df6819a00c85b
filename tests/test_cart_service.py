import uuid

import pytest
from sqlalchemy.exc import OperationalError

from app.core.errors import InvalidInputError, NotFoundError, PersistenceError
from app.database import store_errors
from app.models.cart import GuestOwner, UserOwner
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.services.cart_service import CartService, require_owner, resolve_owner
from app.services.product_service import ProductService


def build_service(cart_repo=None) -> CartService:
    return CartService(cart_repo or CartRepository(), ProductService(ProductRepository()))


def assert_total_consistent(cart):
    assert cart.total_price == sum(item.quantity * item.price for item in cart.items)


def keys(cart):
    return [(item.product_id, item.size, item.color) for item in cart.items]


class FailingSaveCartRepository(CartRepository):
    """Every save hits a store error."""

    def save(self, session, cart):
        with store_errors(session, "save cart"):
            raise OperationalError("UPDATE carts ...", {}, Exception("connection lost"))


# ---- identity resolution ----


def test_resolve_owner_prefers_authenticated_user():
    user_id = uuid.uuid4()

    assert resolve_owner(user_id, "guest_abc") == UserOwner(user_id)
    assert resolve_owner(None, "guest_abc") == GuestOwner("guest_abc")
    assert resolve_owner(None, None) is None


def test_require_owner_rejects_missing_identity():
    with pytest.raises(InvalidInputError):
        require_owner(None, None)


# ---- add ----


def test_add_to_new_identity_creates_one_cart_with_one_line(session, make_product):
    product = make_product(price=12.5)
    service = build_service()
    owner = GuestOwner("guest_1")

    cart, created = service.add_item(session, owner, product.id, 2, size="M", color="Red")

    assert created is True
    assert cart.guest_id == "guest_1"
    assert cart.user_id is None
    assert len(cart.items) == 1
    item = cart.items[0]
    assert (item.product_id, item.size, item.color, item.quantity) == (product.id, "M", "Red", 2)
    assert item.name == product.name
    assert item.image == "https://img.example/tee.png"
    assert cart.total_price == 25.0
    assert service.resolve(session, owner) is not None


def test_add_without_owner_generates_guest_id(session, make_product):
    product = make_product()
    service = build_service()

    first, _ = build_service().add_item(session, None, product.id, 1)
    second, _ = service.add_item(session, None, product.id, 1)

    assert first.guest_id.startswith("guest_")
    assert first.guest_id != second.guest_id


def test_add_same_key_increments_quantity(session, make_product):
    product = make_product(price=10)
    service = build_service()
    owner = UserOwner(uuid.uuid4())

    service.add_item(session, owner, product.id, 1, size="M", color="Red")
    cart, created = service.add_item(session, owner, product.id, 2, size="M", color="Red")

    assert created is False
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3
    assert cart.total_price == 30


def test_add_different_variant_adds_line(session, make_product):
    product = make_product(price=10)
    service = build_service()
    owner = GuestOwner("guest_variants")

    service.add_item(session, owner, product.id, 1, size="M", color="Red")
    cart, _ = service.add_item(session, owner, product.id, 1, size="M", color="Blue")

    assert keys(cart) == [(product.id, "M", "Red"), (product.id, "M", "Blue")]
    assert_total_consistent(cart)


def test_add_keeps_price_snapshot(session, make_product):
    product = make_product(price=10)
    service = build_service()
    owner = GuestOwner("guest_snapshot")
    service.add_item(session, owner, product.id, 1)

    product.price = 50
    session.add(product)
    session.commit()

    cart, _ = service.add_item(session, owner, product.id, 1)

    assert cart.items[0].price == 10
    assert cart.total_price == 20


def test_add_unknown_product_is_not_found(session):
    with pytest.raises(NotFoundError):
        build_service().add_item(session, GuestOwner("guest_x"), uuid.uuid4(), 1)


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_non_positive_quantity_is_invalid(session, make_product, quantity):
    product = make_product()

    with pytest.raises(InvalidInputError):
        build_service().add_item(session, GuestOwner("guest_x"), product.id, quantity)


def test_add_store_failure_propagates(session, make_product):
    product = make_product()
    service = build_service(FailingSaveCartRepository())

    with pytest.raises(PersistenceError):
        service.add_item(session, GuestOwner("guest_fail"), product.id, 1)


# ---- update / remove ----


def test_update_sets_absolute_quantity(session, make_product):
    product = make_product(price=4)
    service = build_service()
    owner = GuestOwner("guest_upd")
    service.add_item(session, owner, product.id, 5, size="S", color="Red")

    cart = service.update_item_quantity(session, owner, product.id, 2, size="S", color="Red")

    assert cart.items[0].quantity == 2
    assert cart.total_price == 8


def test_update_to_zero_removes_only_item(session, make_product):
    product = make_product(price=10)
    service = build_service()
    owner = GuestOwner("guest_zero")
    service.add_item(session, owner, product.id, 1, size="M", color="Red")

    cart = service.update_item_quantity(session, owner, product.id, 0, size="M", color="Red")

    assert cart.items == []
    assert cart.total_price == 0


def test_update_missing_cart_or_line_is_not_found(session, make_product):
    product = make_product()
    service = build_service()
    owner = GuestOwner("guest_missing")

    with pytest.raises(NotFoundError):
        service.update_item_quantity(session, owner, product.id, 1)

    service.add_item(session, owner, product.id, 1, size="M")
    with pytest.raises(NotFoundError):
        service.update_item_quantity(session, owner, product.id, 1, size="L")


def test_remove_twice_second_is_not_found_and_total_intact(session, make_product):
    p1 = make_product(price=10)
    p2 = make_product(price=20)
    service = build_service()
    owner = GuestOwner("guest_rm")
    service.add_item(session, owner, p1.id, 1, size="M", color="Red")
    service.add_item(session, owner, p2.id, 2, size="L", color="Blue")

    cart = service.remove_item(session, owner, p1.id, size="M", color="Red")
    assert cart.total_price == 40

    with pytest.raises(NotFoundError):
        service.remove_item(session, owner, p1.id, size="M", color="Red")

    after = service.get_cart(session, owner)
    assert keys(after) == [(p2.id, "L", "Blue")]
    assert after.total_price == 40


def test_clear_cart_empties_items(session, make_product):
    product = make_product()
    service = build_service()
    owner = GuestOwner("guest_clear")
    service.add_item(session, owner, product.id, 3)

    cart = service.clear_cart(session, owner)

    assert cart.items == []
    assert cart.total_price == 0


def test_get_cart_without_cart_returns_empty_representation(session):
    user_id = uuid.uuid4()

    cart = build_service().get_cart(session, UserOwner(user_id))

    assert cart.id is None
    assert cart.user_id == user_id
    assert cart.items == []
    assert cart.total_price == 0


# ---- merge ----


def test_merge_sums_shared_keys(session, make_product, make_user):
    p1 = make_product(price=10)
    p2 = make_product(price=20)
    user = make_user()
    service = build_service()
    user_owner = UserOwner(user.id)
    guest_owner = GuestOwner("guest_merge")

    service.add_item(session, user_owner, p1.id, 2, size="M", color="Red")
    service.add_item(session, guest_owner, p1.id, 3, size="M", color="Red")
    service.add_item(session, guest_owner, p2.id, 1, size="L", color="Blue")

    cart = service.merge_guest_into_user(session, user.id, "guest_merge")

    assert [(k, item.quantity) for k, item in zip(keys(cart), cart.items)] == [
        ((p1.id, "M", "Red"), 5),
        ((p2.id, "L", "Blue"), 1),
    ]
    assert cart.total_price == 70
    assert cart.user_id == user.id
    assert service.resolve(session, guest_owner) is None


def test_merge_into_user_without_cart_rekeys_guest_cart(session, make_product, make_user):
    product = make_product(price=10)
    user = make_user()
    service = build_service()
    guest_cart, _ = service.add_item(session, GuestOwner("guest_rekey"), product.id, 2)

    cart = service.merge_guest_into_user(session, user.id, "guest_rekey")

    assert cart.id == guest_cart.id
    assert cart.user_id == user.id
    assert cart.guest_id is None
    assert cart.total_price == 20
    assert service.resolve(session, GuestOwner("guest_rekey")) is None


def test_merge_empty_guest_cart_leaves_user_cart_unchanged(session, make_product, make_user):
    product = make_product(price=10)
    user = make_user()
    service = build_service()
    user_owner = UserOwner(user.id)
    before, _ = service.add_item(session, user_owner, product.id, 2, size="M")
    service.add_item(session, GuestOwner("guest_empty"), product.id, 1)
    service.clear_cart(session, GuestOwner("guest_empty"))

    cart = service.merge_guest_into_user(session, user.id, "guest_empty")

    assert cart.model_dump() == before.model_dump()
    assert service.resolve(session, GuestOwner("guest_empty")) is None


def test_merge_empty_guest_cart_without_user_cart(session, make_product, make_user):
    product = make_product()
    user = make_user()
    service = build_service()
    service.add_item(session, GuestOwner("guest_empty2"), product.id, 1)
    service.clear_cart(session, GuestOwner("guest_empty2"))

    cart = service.merge_guest_into_user(session, user.id, "guest_empty2")

    assert cart.id is None
    assert cart.user_id == user.id
    assert cart.items == []


def test_merge_missing_guest_cart_is_not_found(session, make_user):
    user = make_user()

    with pytest.raises(NotFoundError):
        build_service().merge_guest_into_user(session, user.id, "guest_nope")


def test_merge_keeps_guest_cart_when_user_cart_save_fails(session, make_product, make_user):
    product = make_product(price=10)
    user = make_user()
    good = build_service()
    good.add_item(session, UserOwner(user.id), product.id, 1, size="M")
    good.add_item(session, GuestOwner("guest_keep"), product.id, 4, size="M")

    failing = build_service(FailingSaveCartRepository())
    with pytest.raises(PersistenceError):
        failing.merge_guest_into_user(session, user.id, "guest_keep")

    guest = good.get_cart(session, GuestOwner("guest_keep"))
    user_cart = good.get_cart(session, UserOwner(user.id))
    assert guest.items[0].quantity == 4
    assert user_cart.items[0].quantity == 1
    assert user_cart.total_price == 10


def test_total_invariant_across_mutations(session, make_product):
    p1 = make_product(price=3.5)
    p2 = make_product(price=7)
    service = build_service()
    owner = GuestOwner("guest_inv")

    cart, _ = service.add_item(session, owner, p1.id, 2, size="S")
    assert_total_consistent(cart)
    cart, _ = service.add_item(session, owner, p2.id, 1, color="Red")
    assert_total_consistent(cart)
    cart, _ = service.add_item(session, owner, p1.id, 1, size="S")
    assert_total_consistent(cart)
    cart = service.update_item_quantity(session, owner, p2.id, 4, color="Red")
    assert_total_consistent(cart)
    cart = service.remove_item(session, owner, p1.id, size="S")
    assert_total_consistent(cart)
    assert cart.total_price == 28
    assert len(set(keys(cart))) == len(cart.items)
