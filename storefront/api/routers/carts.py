#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service, get_current_user_id
from storefront.domain.schemas import (
    CartAddressIn,
    CartOut,
    ItemIn,
    OrderOut,
    QuantityIn,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartOut)
def get_cart(
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(user_id)


@router.post("/items", response_model=CartOut)
def add_item(
    payload: ItemIn,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_item(
        user_id=user_id,
        product_id=payload.product_id,
        variant_id=payload.variant_id,
        quantity=payload.quantity,
    )


@router.put("/items/{item_id}", response_model=CartOut)
def update_item(
    item_id: int,
    payload: QuantityIn,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.update_item_quantity(user_id, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartOut)
def remove_item(
    item_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(user_id, item_id)


@router.put("/shipping-address", response_model=CartOut)
def set_shipping_address(
    payload: CartAddressIn,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.set_shipping_address(user_id, payload.address_id)


@router.put("/billing-address", response_model=CartOut)
def set_billing_address(
    payload: CartAddressIn,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.set_billing_address(user_id, payload.address_id)


@router.post("/copy-from-order/{order_id}", response_model=CartOut)
def copy_items_from_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    return svc.copy_items_from_order(user_id, order_id)


@router.post("/checkout", response_model=OrderOut, status_code=201)
def checkout(
    user_id: int = Depends(get_current_user_id),
    svc: CartService = Depends(get_cart_service),
):
    """
    Turns the cart into an order using the addresses stored on the cart.
    """
    return svc.checkout(user_id)
