# storefront/domain/order_status.py
from enum import Enum

from storefront.domain.exceptions import InvalidTransition


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "CREDIT_CARD"
    DEBIT_CARD = "DEBIT_CARD"
    PAYPAL = "PAYPAL"
    UPI = "UPI"
    NET_BANKING = "NET_BANKING"
    WALLET = "WALLET"


TERMINAL_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.DELIVERED})

#allowed moves, anything else is rejected (same status and skipped stages too)
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

STRICT = "strict"
LEGACY = "legacy"


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: OrderStatus, target: OrderStatus, policy: str = STRICT) -> bool:
    """
    strict: only pairs from ALLOWED_TRANSITIONS.
    legacy: everything except leaving a terminal state and SHIPPED -> CONFIRMED
    (so e.g. PENDING -> DELIVERED passes).
    """
    if is_terminal(current):
        return False

    if policy == LEGACY:
        return not (current == OrderStatus.SHIPPED and target == OrderStatus.CONFIRMED)

    if policy != STRICT:
        raise ValueError(f"Unknown transition policy: {policy}")

    return target in ALLOWED_TRANSITIONS[current]


def validate_transition(current: OrderStatus, target: OrderStatus, policy: str = STRICT) -> None:
    if not can_transition(current, target, policy):
        raise InvalidTransition(current.value, target.value)


def validate_cancellation(current: OrderStatus) -> None:
    #cancel is legal from every non-terminal state, whatever the policy
    if is_terminal(current):
        raise InvalidTransition(current.value, OrderStatus.CANCELLED.value)
