import pytest

from storefront.domain.exceptions import InvalidTransition
from storefront.domain.order_status import (
    LEGACY,
    STRICT,
    OrderStatus,
    can_transition,
    validate_cancellation,
    validate_transition,
)

ALL = list(OrderStatus)


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.CONFIRMED),
        (OrderStatus.CONFIRMED, OrderStatus.SHIPPED),
        (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.CONFIRMED, OrderStatus.CANCELLED),
        (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    ],
)
def test_strict_allows_forward_moves_and_cancel(current, target):
    validate_transition(current, target, STRICT)


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.DELIVERED),
        (OrderStatus.PENDING, OrderStatus.SHIPPED),
        (OrderStatus.CONFIRMED, OrderStatus.PENDING),
        (OrderStatus.SHIPPED, OrderStatus.CONFIRMED),
        (OrderStatus.PENDING, OrderStatus.PENDING),
    ],
)
def test_strict_rejects_skips_and_regressions(current, target):
    with pytest.raises(InvalidTransition):
        validate_transition(current, target, STRICT)


@pytest.mark.parametrize("policy", [STRICT, LEGACY])
@pytest.mark.parametrize("terminal", [OrderStatus.CANCELLED, OrderStatus.DELIVERED])
@pytest.mark.parametrize("target", ALL)
def test_terminal_states_have_no_exits(policy, terminal, target):
    assert not can_transition(terminal, target, policy)


def test_legacy_only_blocks_shipped_to_confirmed():
    assert not can_transition(OrderStatus.SHIPPED, OrderStatus.CONFIRMED, LEGACY)
    # loose guard: skipping stages is accepted
    assert can_transition(OrderStatus.PENDING, OrderStatus.DELIVERED, LEGACY)
    assert can_transition(OrderStatus.CONFIRMED, OrderStatus.PENDING, LEGACY)


def test_invalid_transition_carries_both_states():
    with pytest.raises(InvalidTransition) as exc:
        validate_transition(OrderStatus.SHIPPED, OrderStatus.CONFIRMED)

    assert exc.value.current == "SHIPPED"
    assert exc.value.target == "CONFIRMED"
    assert exc.value.status_code == 409


def test_unknown_policy_is_an_error():
    with pytest.raises(ValueError):
        can_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED, "lenient")


@pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.SHIPPED])
def test_cancellation_allowed_from_open_states(status):
    validate_cancellation(status)


@pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.DELIVERED])
def test_cancellation_rejected_from_terminal_states(status):
    with pytest.raises(InvalidTransition):
        validate_cancellation(status)
