# storefront/services/payment_service.py
import uuid
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel
from storefront.domain.exceptions import OrderNotFound, PaymentNotFound, PaymentRejected
from storefront.domain.order_status import OrderStatus, PaymentMethod, PaymentStatus
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Payment records for orders. There is no gateway behind this: a payment
    is accepted as soon as it matches the order total stored at checkout.
    """

    def __init__(self, db: Session):
        self.repo = PaymentRepo(db)
        self.order_repo = OrderRepo(db)

    def initiate_payment(
        self,
        user_id: int,
        order_id: int,
        payment_method: PaymentMethod,
        amount: Decimal,
        idempotency_key: str | None = None,
    ) -> PaymentModel:
        logger.info(f"Initiating payment for order {order_id} with {payment_method} and amount {amount}")

        # ownership first, a replayed key must not expose another user's payment
        order = self.order_repo.find_by_id_and_user(order_id, user_id)
        if not order:
            raise OrderNotFound(order_id)

        if idempotency_key:
            existing = self.repo.find_by_transaction_id(idempotency_key)
            if existing:
                if existing.order_id != order_id:
                    raise PaymentRejected("Idempotency key already used for another order")
                logger.info(f"Returning existing payment {existing.id} for idempotency key")
                return existing

        if order.order_status == OrderStatus.CANCELLED:
            raise PaymentRejected(f"Order {order_id} is cancelled")

        # the order total is the snapshot from checkout, it is not re-priced here
        if Decimal(amount) != order.total_amount:
            raise PaymentRejected(
                f"Payment amount ({Decimal(amount):.2f}) does not match order total ({order.total_amount:.2f})"
            )

        if self.repo.find_by_order_and_status(order_id, PaymentStatus.COMPLETED):
            raise PaymentRejected(f"Payment already completed for order: {order_id}")

        payment = PaymentModel(
            order_id=order_id,
            payment_method=PaymentMethod(payment_method),
            payment_status=PaymentStatus.COMPLETED,
            amount=order.total_amount,
            transaction_id=idempotency_key or uuid.uuid4().hex,
            gateway_reference=f"TXN_{uuid.uuid4().hex[:8].upper()}",
        )
        order.payment_status = PaymentStatus.COMPLETED

        try:
            self.repo.add(payment)
            self.order_repo.save(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Payment {payment.id} completed for order {order_id}")
        return payment

    def get_payment(self, user_id: int, payment_id: int) -> PaymentModel:
        payment = self.repo.get_payment(payment_id)
        if not payment or not self.order_repo.find_by_id_and_user(payment.order_id, user_id):
            raise PaymentNotFound(payment_id)
        return payment

    def get_payment_for_order(self, user_id: int, order_id: int) -> PaymentModel:
        if not self.order_repo.find_by_id_and_user(order_id, user_id):
            raise OrderNotFound(order_id)

        payment = self.repo.find_latest_for_order(order_id)
        if not payment:
            raise PaymentNotFound(f"order {order_id}")
        return payment

    def refund_payment(self, user_id: int, payment_id: int) -> PaymentModel:
        logger.info(f"Refunding payment {payment_id}")

        payment = self.get_payment(user_id, payment_id)

        if payment.payment_status == PaymentStatus.REFUNDED:
            raise PaymentRejected("Payment is already refunded")
        if payment.payment_status != PaymentStatus.COMPLETED:
            raise PaymentRejected("Cannot refund payment that is not completed")

        order = self.order_repo.find_by_id(payment.order_id)
        payment.payment_status = PaymentStatus.REFUNDED
        order.payment_status = PaymentStatus.REFUNDED

        try:
            self.order_repo.save(order)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Payment {payment_id} refunded")
        return payment
