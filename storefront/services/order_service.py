# storefront/services/order_service.py
from dataclasses import dataclass
from decimal import Decimal
from math import ceil

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.exceptions import CartNotFound, EmptyCart, OrderNotFound, ProductValidationFailed
from storefront.domain.order_status import (
    OrderStatus,
    PaymentStatus,
    validate_cancellation,
    validate_transition,
)
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.product_validation import ProductPricingInfo, ProductValidationService
from storefront.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ORDER_TRANSITION_POLICY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal("0.01")


@dataclass
class Page:
    items: list
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.size) if self.size else 0


class OrderService:
    """
    Order workflow: cart -> order conversion and the order status lifecycle.

    Commands (create, cancel, update status) write, queries (get, list) only read.
    Stores are built on the request session, collaborators are passed in.
    """

    def __init__(
        self,
        db: Session,
        product_validation: ProductValidationService,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
        transition_policy: str = ORDER_TRANSITION_POLICY,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.product_validation = product_validation
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()
        self.transition_policy = transition_policy

    # commands
    def create_order_from_cart(
        self,
        user_id: int,
        shipping_address_id: int,
        billing_address_id: int,
    ) -> OrderModel:
        """
        1. load the user's cart (CartNotFound / EmptyCart)
        2. validate every line against the catalog before writing anything
        3. build order lines from the catalog prices of that validation pass
        4. insert the order and clear the cart lines in one transaction
        5. notify (async)

        Runs under the per-user checkout lock, so two checkouts of the same
        cart can't both succeed.
        """
        if shipping_address_id is None or billing_address_id is None:
            raise ValueError("Shipping and billing address ids are required")

        logger.info(f"Creating order from cart for user {user_id}")

        with self.lock_service.checkout_lock(user_id):
            order = self._create_order(user_id, shipping_address_id, billing_address_id)

        self.notification_service.send_order_notification(user_id, order.id, order.order_status.value)
        return order

    def _create_order(self, user_id: int, shipping_address_id: int, billing_address_id: int) -> OrderModel:
        cart = self.cart_repo.find_by_user(user_id)
        if not cart:
            raise CartNotFound(user_id)

        if not cart.items:
            raise EmptyCart()

        pricing = self._validate_cart_lines(cart)

        lines = [self._build_order_line(item, info) for item, info in zip(cart.items, pricing)]
        order = OrderModel(
            user_id=user_id,
            shipping_address_id=shipping_address_id,
            billing_address_id=billing_address_id,
            order_status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            items=lines,
            total_amount=sum((line.total_price for line in lines), Decimal("0.00")),
        )

        try:
            self.repo.add(order)
            self.cart_repo.save(cart, [])
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            logger.error(f"Order creation for user {user_id} rolled back, cart {cart.id} left untouched")
            raise

        logger.info(f"Order {order.id} created from cart {cart.id}, total {order.total_amount}")
        return order

    def _validate_cart_lines(self, cart: CartModel) -> list[ProductPricingInfo]:
        logger.info(f"Validating {len(cart.items)} line(s) of cart {cart.id}")

        pricing = []
        for item in cart.items:
            try:
                pricing.append(
                    self.product_validation.check_line(item.product_id, item.variant_id, item.quantity)
                )
            except ProductValidationFailed as e:
                logger.warning(f"Order validation failed for cart {cart.id}: {e.message}")
                raise
        return pricing

    @staticmethod
    def _build_order_line(item: CartItemModel, pricing: ProductPricingInfo) -> OrderItemModel:
        # price comes from the catalog, never from the price cached on the cart line
        discount = Decimal("0.00")
        tax = Decimal("0.00")
        total = (pricing.unit_price * item.quantity - discount + tax).quantize(CENT)

        return OrderItemModel(
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            unit_price=pricing.unit_price,
            discount_amount=discount,
            tax_amount=tax,
            total_price=total,
            product_name=pricing.product_name,
            variant_name=pricing.variant_name,
            sku=pricing.sku,
        )

    def cancel_order(self, order_id: int, user_id: int) -> OrderModel:
        logger.info(f"Cancelling order {order_id} for user {user_id}")

        order = self.repo.find_by_id_and_user(order_id, user_id)
        if not order:
            raise OrderNotFound(order_id)

        validate_cancellation(order.order_status)

        order.order_status = OrderStatus.CANCELLED
        self.repo.save(order)
        self.repo.commit()

        logger.info(f"Order {order_id} cancelled")
        self.notification_service.send_order_notification(user_id, order.id, order.order_status.value)
        return order

    def update_order_status(self, order_id: int, new_status: OrderStatus | str) -> OrderModel:
        new_status = OrderStatus(new_status)
        logger.info(f"Updating order {order_id} status to {new_status.value}")

        order = self.repo.find_by_id(order_id)
        if not order:
            raise OrderNotFound(order_id)

        validate_transition(order.order_status, new_status, self.transition_policy)

        previous = order.order_status
        order.order_status = new_status
        self.repo.save(order)
        self.repo.commit()

        logger.info(f"Order {order_id} status {previous.value} -> {new_status.value}")
        self.notification_service.send_order_notification(order.user_id, order.id, new_status.value)
        return order

    # queries
    def get_order_by_id(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.repo.find_by_id_and_user(order_id, user_id)

    def get_user_orders(self, user_id: int, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Page:
        if page < 0:
            raise ValueError("Page index must not be negative")
        if size < 1:
            raise ValueError("Page size must be at least 1")

        size = min(size, MAX_PAGE_SIZE)
        orders, total = self.repo.find_by_user_paged(user_id, page, size)
        return Page(items=orders, total=total, page=page, size=size)
