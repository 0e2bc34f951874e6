from fastapi import APIRouter, Depends

from storefront.api.deps import get_order_service, require_admin
from storefront.domain.schemas import OrderOut, OrderStatusUpdate
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.put("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_order_status(order_id, payload.status)
