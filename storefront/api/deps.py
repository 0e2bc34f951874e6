# storefront/api/deps.py
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.services.address_service import AddressService
from storefront.services.cart_service import CartService
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService
from storefront.services.product_client import ProductClient
from storefront.services.product_validation import ProductValidationService
from storefront.utils import settings


def get_current_user_id(x_user_id: int | None = Header(None)) -> int:
    """
    Identity of the caller. Tokens are verified upstream, which forwards
    the authenticated user id in X-User-Id.
    """
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return x_user_id


def require_admin(x_admin_token: str | None = Header(None)) -> None:
    if not settings.ADMIN_API_TOKEN or x_admin_token != settings.ADMIN_API_TOKEN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")


def get_product_validation() -> ProductValidationService:
    return ProductValidationService(ProductClient())


def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_order_service(
    db: Session = Depends(get_db),
    product_validation: ProductValidationService = Depends(get_product_validation),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(
        db=db,
        product_validation=product_validation,
        lock_service=lock_service,
        notification_service=notification_service,
    )


def get_cart_service(
    db: Session = Depends(get_db),
    product_validation: ProductValidationService = Depends(get_product_validation),
    order_service: OrderService = Depends(get_order_service),
) -> CartService:
    return CartService(db=db, product_validation=product_validation, order_service=order_service)


def get_address_service(db: Session = Depends(get_db)) -> AddressService:
    return AddressService(db)


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(db)
