from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, String, Enum

from storefront.data.database import Base
from storefront.domain.order_status import PaymentMethod, PaymentStatus


def _now():
    return datetime.now(timezone.utc)


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)

    payment_method = Column(Enum(PaymentMethod, native_enum=False, length=20), nullable=False)
    payment_status = Column(
        Enum(PaymentStatus, native_enum=False, length=20),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    amount = Column(Numeric(12, 2), nullable=False)

    # doubles as the idempotency key
    transaction_id = Column(String(64), nullable=False, unique=True)
    gateway_reference = Column(String(64), nullable=True)
    failure_reason = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_now, onupdate=_now)
