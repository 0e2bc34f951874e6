from fastapi import APIRouter, Depends

from storefront.api.deps import get_current_user_id, get_payment_service
from storefront.domain.schemas import PaymentCreate, PaymentOut
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("", response_model=PaymentOut, status_code=201)
def initiate_payment(
    payload: PaymentCreate,
    user_id: int = Depends(get_current_user_id),
    svc: PaymentService = Depends(get_payment_service),
):
    return svc.initiate_payment(
        user_id=user_id,
        order_id=payload.order_id,
        payment_method=payload.payment_method,
        amount=payload.amount,
        idempotency_key=payload.idempotency_key,
    )


@router.get("/order/{order_id}", response_model=PaymentOut)
def get_payment_for_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: PaymentService = Depends(get_payment_service),
):
    return svc.get_payment_for_order(user_id, order_id)


@router.get("/{payment_id}", response_model=PaymentOut)
def get_payment(
    payment_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: PaymentService = Depends(get_payment_service),
):
    return svc.get_payment(user_id, payment_id)


@router.post("/{payment_id}/refund", response_model=PaymentOut)
def refund_payment(
    payment_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: PaymentService = Depends(get_payment_service),
):
    return svc.refund_payment(user_id, payment_id)
