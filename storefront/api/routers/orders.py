# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_address_service, get_current_user_id, get_order_service
from storefront.domain.exceptions import OrderNotFound
from storefront.domain.schemas import OrderCreate, OrderOut, OrderPage
from storefront.services.address_service import AddressService
from storefront.services.order_service import OrderService
from storefront.utils.settings import DEFAULT_PAGE_SIZE

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
    addresses: AddressService = Depends(get_address_service),
):
    """
    Creates an order from the caller's cart and empties the cart.
    """
    addresses.require_owned(user_id, payload.shipping_address_id, payload.billing_address_id)
    return svc.create_order_from_cart(user_id, payload.shipping_address_id, payload.billing_address_id)


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = Query(0, ge=0),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1),
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
):
    result = svc.get_user_orders(user_id, page, size)
    return OrderPage(
        items=[OrderOut.model_validate(o) for o in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
):
    order = svc.get_order_by_id(order_id, user_id)
    if not order:
        raise OrderNotFound(order_id)
    return order


@router.put("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: OrderService = Depends(get_order_service),
):
    return svc.cancel_order(order_id, user_id)
