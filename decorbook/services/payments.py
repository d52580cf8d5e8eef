# decorbook/services/payments.py
# Payments: starts Snap checkouts for both legs and applies Midtrans notifications to orders.

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import and_, update
from sqlalchemy.orm import Session

from decorbook.core.errors import ConflictError, InvalidTransition, NotFoundError
from decorbook.models.order import Order, OrderStatus, PaymentStatus
from decorbook.models.user import User
from decorbook.services import lifecycle
from decorbook.services.booking import get_order_for
from decorbook.services.lifecycle import PaymentLeg
from decorbook.services.midtrans import MidtransClient

logger = logging.getLogger(__name__)

ITEM_LABELS = {
    PaymentLeg.deposit: "DP",
    PaymentLeg.balance: "Pelunasan",
}


def _creation_guard(leg: PaymentLeg):
    """SQL condition that must still hold when the transaction id is written"""
    if leg is PaymentLeg.deposit:
        return and_(Order.dp_status != PaymentStatus.paid, Order.status != OrderStatus.cancelled)
    return and_(
        Order.dp_status == PaymentStatus.paid,
        Order.final_status != PaymentStatus.paid,
        Order.status != OrderStatus.cancelled,
    )


def start_payment(
    db: Session,
    gateway: MidtransClient,
    order_id: str,
    user: User,
    leg: PaymentLeg,
) -> Dict[str, Any]:
    """
    Create a Snap transaction for one leg of an order.

    The amount always comes from the stored order. The transaction id is
    written with a conditional UPDATE, so a leg that changed state while the
    gateway call was in flight yields a ConflictError instead of a bogus id.
    """
    order = get_order_for(db, order_id, user)

    if leg is PaymentLeg.deposit:
        lifecycle.ensure_deposit_payable(order)
        amount = order.dp_amount
    else:
        lifecycle.ensure_balance_payable(order)
        amount = order.final_amount

    gateway_id = lifecycle.gateway_order_id(order.id, leg)
    response = gateway.create_transaction(
        order_id=gateway_id,
        gross_amount=amount,
        item_id=str(order.package_id),
        item_name=f"{order.package.name} - {ITEM_LABELS[leg]}",
        email=user.email,
        first_name=user.name,
    )

    # Snap answers with a token; transaction_id only appears on some API versions
    transaction_id = response.get("transaction_id") or response.get("token")

    stmt = (
        update(Order)
        .where(Order.id == order.id, _creation_guard(leg))
        .values({f"{leg.value}_transaction_id": transaction_id})
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    if result.rowcount == 0:
        db.rollback()
        logger.warning(f"Order {order.id} changed state while creating the {leg.name} payment")
        raise ConflictError("Order state changed while creating the payment, please retry")
    db.commit()

    logger.info(f"{leg.name.capitalize()} payment {transaction_id} created for order {order.id} ({amount})")
    return {
        "redirect_url": response.get("redirect_url"),
        "token": response.get("token"),
        "transaction_id": transaction_id,
        "gateway_order_id": gateway_id,
        "amount": amount,
    }


def handle_notification(db: Session, payload: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Apply a Midtrans notification to its order.

    Raises ValidationError for an order id without a leg suffix and
    NotFoundError for an unknown order. Unrecognized or stale statuses are
    not applied; the result carries applied=False so the caller still
    acknowledges the notification.
    """
    gateway_id = str(payload.get("order_id") or "")
    transaction_status = payload.get("transaction_status")

    order_id, leg = lifecycle.parse_gateway_order_id(gateway_id)
    order = db.get(Order, order_id)
    if order is None:
        raise NotFoundError("Order not found")

    result = {
        "message": "Notification received",
        "originalOrderId": order_id,
        "transaction_status": transaction_status,
        "applied": False,
    }

    try:
        incoming = lifecycle.classify_gateway_status(transaction_status)
        changes = lifecycle.plan_notification(order, leg, incoming, now=now)
    except InvalidTransition as e:
        logger.warning(f"Notification for {gateway_id} ignored: {e.message}")
        result["reason"] = e.message
        return result

    changes.update(
        transaction_status=transaction_status,
        fraud_status=payload.get("fraud_status"),
        payment_type=payload.get("payment_type"),
    )

    # Guard on the leg status we planned from, so a concurrent callback is not overwritten
    leg_column = Order.dp_status if leg is PaymentLeg.deposit else Order.final_status
    stmt = (
        update(Order)
        .where(Order.id == order.id, leg_column == lifecycle.leg_status(order, leg))
        .values(changes)
        .execution_options(synchronize_session=False)
    )
    if db.execute(stmt).rowcount == 0:
        db.rollback()
        raise ConflictError("Order changed while applying the notification")
    db.commit()
    db.refresh(order)

    logger.info(
        f"Order {order.id} updated from notification: {leg.name}={transaction_status}, status={order.status.value}"
    )
    result["applied"] = True
    result["status"] = order.status.value
    return result
