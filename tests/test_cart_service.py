from decimal import Decimal

import pytest

from storefront.data.models.address import AddressModel
from storefront.domain.exceptions import (
    AddressNotFound,
    CartItemNotFound,
    CartNotFound,
    MissingCheckoutAddress,
    OrderNotFound,
    ProductValidationFailed,
)


def _address(db, user_id):
    address = AddressModel(user_id=user_id, line1="1 Main St", city="Town", postal_code="00-001", country="PL")
    db.add(address)
    db.commit()
    return address


def test_get_cart_without_cart(cart_service):
    with pytest.raises(CartNotFound):
        cart_service.get_cart(1)


def test_add_item_creates_cart_with_catalog_snapshot(cart_service):
    cart = cart_service.add_item(user_id=1, product_id=1, variant_id=11, quantity=2)

    assert cart.user_id == 1
    assert len(cart.items) == 1
    item = cart.items[0]
    assert (item.product_id, item.variant_id, item.quantity) == (1, 11, 2)
    assert item.unit_price == Decimal("120.00")
    assert item.sku == "KB-ISO"
    assert item.variant_name == "ISO layout"


def test_add_same_product_merges_lines(cart_service):
    cart_service.add_item(1, 2, None, 1)
    cart = cart_service.add_item(1, 2, None, 2)

    assert len(cart.items) == 1
    assert cart.items[0].quantity == 3


def test_variant_and_base_product_are_separate_lines(cart_service):
    cart_service.add_item(1, 1, None, 1)
    cart = cart_service.add_item(1, 1, 11, 1)

    assert {(i.product_id, i.variant_id) for i in cart.items} == {(1, None), (1, 11)}


def test_merged_quantity_is_checked_against_stock(cart_service):
    cart_service.add_item(1, 2, None, 4)

    with pytest.raises(ProductValidationFailed, match="requested quantity: 6"):
        cart_service.add_item(1, 2, None, 2)

    assert cart_service.get_cart(1).items[0].quantity == 4


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_item_rejects_non_positive_quantity(cart_service, quantity):
    with pytest.raises(ValueError):
        cart_service.add_item(1, 2, None, quantity)


def test_add_inactive_product_does_not_create_cart(cart_service):
    with pytest.raises(ProductValidationFailed):
        cart_service.add_item(1, 4, None, 1)

    with pytest.raises(CartNotFound):
        cart_service.get_cart(1)


def test_update_item_quantity(cart_service, product_client):
    cart = cart_service.add_item(1, 2, None, 1)
    product_client.products[2]["base_price"] = 30.00

    cart = cart_service.update_item_quantity(1, cart.items[0].id, 4)

    assert cart.items[0].quantity == 4
    assert cart.items[0].unit_price == Decimal("30.00")


def test_update_item_quantity_over_stock(cart_service):
    cart = cart_service.add_item(1, 2, None, 1)

    with pytest.raises(ProductValidationFailed):
        cart_service.update_item_quantity(1, cart.items[0].id, 50)


def test_update_item_of_another_users_cart(cart_service):
    other = cart_service.add_item(2, 2, None, 1)
    cart_service.add_item(1, 1, None, 1)

    with pytest.raises(CartItemNotFound):
        cart_service.update_item_quantity(1, other.items[0].id, 2)


def test_remove_item(cart_service):
    cart_service.add_item(1, 1, None, 1)
    cart = cart_service.add_item(1, 2, None, 1)
    mouse = next(i for i in cart.items if i.product_id == 2)

    cart = cart_service.remove_item(1, mouse.id)

    assert [i.product_id for i in cart.items] == [1]


def test_remove_unknown_item(cart_service):
    cart_service.add_item(1, 1, None, 1)

    with pytest.raises(CartItemNotFound):
        cart_service.remove_item(1, 12345)


def test_set_addresses_requires_ownership(db, cart_service):
    cart_service.add_item(1, 1, None, 1)
    mine = _address(db, 1)
    theirs = _address(db, 2)

    cart = cart_service.set_shipping_address(1, mine.id)
    cart = cart_service.set_billing_address(1, mine.id)
    assert (cart.shipping_address_id, cart.billing_address_id) == (mine.id, mine.id)

    with pytest.raises(AddressNotFound):
        cart_service.set_billing_address(1, theirs.id)


def test_checkout_requires_addresses(cart_service):
    cart_service.add_item(1, 1, None, 1)

    with pytest.raises(MissingCheckoutAddress):
        cart_service.checkout(1)


def test_checkout_creates_order_and_empties_cart(db, cart_service):
    cart_service.add_item(1, 1, None, 2)
    address = _address(db, 1)
    cart_service.set_shipping_address(1, address.id)
    cart_service.set_billing_address(1, address.id)

    order = cart_service.checkout(1)

    assert order.total_amount == Decimal("200.00")
    assert order.shipping_address_id == address.id
    assert cart_service.get_cart(1).items == []


def test_copy_items_from_order_reprices_and_skips_invalid(db, cart_service, seed_cart, order_service, product_client):
    seed_cart(1, (1, None, 1, "100.00"), (2, None, 2, "25.50"))
    order = order_service.create_order_from_cart(1, 10, 10)

    product_client.products[1]["base_price"] = 90.00
    product_client.products[2]["status"] = "DISCONTINUED"

    cart = cart_service.copy_items_from_order(1, order.id)

    assert [(i.product_id, i.quantity, i.unit_price) for i in cart.items] == [(1, 1, Decimal("90.00"))]


def test_copy_items_from_someone_elses_order(cart_service, seed_cart, order_service):
    seed_cart(2, (1, None, 1, "100.00"))
    order = order_service.create_order_from_cart(2, 10, 10)

    with pytest.raises(OrderNotFound):
        cart_service.copy_items_from_order(1, order.id)
