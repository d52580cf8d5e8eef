# decorbook/services/lifecycle.py
# Order lifecycle rules: deposit/balance split, gateway order ids (<id>_dp, <id>_final),
# the payment callback state machine and the checkout guards.
# Pure functions: they read an order and an event and return the fields to write.

import enum
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from decorbook.core.errors import InvalidTransition, PaymentGuardError, ValidationError
from decorbook.models.order import Order, OrderStatus, PaymentStatus

logger = logging.getLogger(__name__)

DEPOSIT_PERCENT = 30


class PaymentLeg(str, enum.Enum):
    deposit = "dp"
    balance = "final"


LEG_SUFFIXES = {
    PaymentLeg.deposit: "_dp",
    PaymentLeg.balance: "_final",
}

# Midtrans transaction_status -> leg status
GATEWAY_STATUS_MAP = {
    "settlement": PaymentStatus.paid,
    "capture": PaymentStatus.paid,
    "cancel": PaymentStatus.failed,
    "expire": PaymentStatus.failed,
    "failure": PaymentStatus.failed,
    "deny": PaymentStatus.failed,
    "pending": PaymentStatus.pending,
}

# (current leg status, incoming leg status) pairs that may be applied.
# PAID is absorbing; FAILED can be retried.
LEG_TRANSITIONS = {
    (PaymentStatus.pending, PaymentStatus.pending),
    (PaymentStatus.pending, PaymentStatus.paid),
    (PaymentStatus.pending, PaymentStatus.failed),
    (PaymentStatus.failed, PaymentStatus.pending),
    (PaymentStatus.failed, PaymentStatus.paid),
    (PaymentStatus.failed, PaymentStatus.failed),
    (PaymentStatus.paid, PaymentStatus.paid),
}

# Overall status change on a successful leg: allowed source statuses -> target
OVERALL_ON_PAID = {
    PaymentLeg.deposit: ({OrderStatus.pending}, OrderStatus.dp_paid),
    PaymentLeg.balance: ({OrderStatus.dp_paid, OrderStatus.in_progress}, OrderStatus.finished),
}


def split_amount(price: int, percent: int = DEPOSIT_PERCENT) -> Tuple[int, int]:
    """
    Splits a package price into (deposit, balance).

    The deposit is rounded half-up to a whole unit, so 101 -> (30, 71) and
    105 -> (32, 73). The two parts always add up to the price.
    """
    if price < 0:
        raise ValidationError("Price must not be negative")
    dp_amount = (price * percent * 2 + 100) // 200
    return dp_amount, price - dp_amount


def gateway_order_id(order_id: str, leg: PaymentLeg) -> str:
    return f"{order_id}{LEG_SUFFIXES[leg]}"


def parse_gateway_order_id(value: str) -> Tuple[str, PaymentLeg]:
    """Splits a gateway order id into the order id and the payment leg."""
    for leg, suffix in LEG_SUFFIXES.items():
        if value and value.endswith(suffix) and len(value) > len(suffix):
            return value[: -len(suffix)], leg
    raise ValidationError(f"Order id {value!r} has no _dp or _final suffix")


def classify_gateway_status(transaction_status: Any) -> PaymentStatus:
    status = None
    if isinstance(transaction_status, str):
        status = GATEWAY_STATUS_MAP.get(transaction_status.lower())
    if status is None:
        raise InvalidTransition(f"Unrecognized transaction status {transaction_status!r}")
    return status


def leg_status(order: Order, leg: PaymentLeg) -> PaymentStatus:
    return order.dp_status if leg is PaymentLeg.deposit else order.final_status


def plan_notification(
    order: Order,
    leg: PaymentLeg,
    incoming: PaymentStatus,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Returns the order fields to update for a gateway notification.

    Raises InvalidTransition when the notification is stale, e.g. a
    "pending" arriving after the leg was already paid.
    """
    current = leg_status(order, leg)
    if (current, incoming) not in LEG_TRANSITIONS:
        raise InvalidTransition(
            f"Cannot move {leg.name} leg of order {order.id} from {current.value} to {incoming.value}"
        )

    now = now or datetime.utcnow()
    prefix = leg.value
    changes: Dict[str, Any] = {f"{prefix}_status": incoming}

    if incoming is PaymentStatus.paid:
        if getattr(order, f"{prefix}_paid_at") is None:
            changes[f"{prefix}_paid_at"] = now
        sources, target = OVERALL_ON_PAID[leg]
        if order.status in sources:
            changes["status"] = target
        elif order.status == OrderStatus.cancelled:
            logger.warning(f"Order {order.id} is cancelled but its {leg.name} leg was paid")
    elif incoming is PaymentStatus.failed and leg is PaymentLeg.deposit:
        changes["status"] = OrderStatus.cancelled

    return changes


def ensure_deposit_payable(order: Order) -> None:
    if order.dp_status == PaymentStatus.paid:
        raise PaymentGuardError("Deposit has already been paid")
    if order.status == OrderStatus.cancelled:
        raise PaymentGuardError("Order has been cancelled")


def ensure_balance_payable(order: Order) -> None:
    if order.status == OrderStatus.cancelled:
        raise PaymentGuardError("Order has been cancelled")
    if order.dp_status != PaymentStatus.paid:
        raise PaymentGuardError("Deposit has not been paid yet; the balance cannot be paid before it")
    if order.final_status == PaymentStatus.paid:
        raise PaymentGuardError("Balance has already been paid")
