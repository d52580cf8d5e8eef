# decorbook/api/payments.py
# Payment routes: deposit/balance checkout and the Midtrans notification webhook.
import asyncio
import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from decorbook.api.schemas import PaymentRequest
from decorbook.core.security import get_current_user, get_settings
from decorbook.db.session import get_db
from decorbook.models.user import User
from decorbook.services import payments
from decorbook.services.lifecycle import PaymentLeg
from decorbook.services.midtrans import MidtransClient, verify_notification_signature

logger = logging.getLogger(__name__)

router = APIRouter()
webhook_router = APIRouter()

def get_gateway(request: Request) -> MidtransClient:
    return request.app.state.gateway

@router.post("/create")
def create_deposit_payment(body: PaymentRequest, db: Session = Depends(get_db),
                           gateway: MidtransClient = Depends(get_gateway),
                           current_user: User = Depends(get_current_user)):
    result = payments.start_payment(db, gateway, body.orderId, current_user, PaymentLeg.deposit)
    return {"message": "Deposit payment created", **result}

@router.post("/final")
def create_balance_payment(body: PaymentRequest, db: Session = Depends(get_db),
                           gateway: MidtransClient = Depends(get_gateway),
                           current_user: User = Depends(get_current_user)):
    result = payments.start_payment(db, gateway, body.orderId, current_user, PaymentLeg.balance)
    return {"message": "Balance payment created", **result}

@webhook_router.post("/notification")
async def midtrans_notification(request: Request, db: Session = Depends(get_db)):
    """
    Midtrans payment notification.
    Answers 200 for anything that was received and understood, so Midtrans stops re-sending.
    """
    try:
        payload = json.loads(await request.body())
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.error("Midtrans notification with invalid JSON")
        raise HTTPException(status_code=400, detail="Invalid JSON")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON")

    logger.info(
        f"Midtrans notification received: order_id={payload.get('order_id')} "
        f"status={payload.get('transaction_status')} fraud={payload.get('fraud_status')}"
    )

    settings = get_settings(request)
    if settings.MIDTRANS_VERIFY_SIGNATURE and not verify_notification_signature(
        payload, settings.MIDTRANS_SERVER_KEY
    ):
        logger.error(f"Midtrans notification signature mismatch for {payload.get('order_id')}")
        raise HTTPException(status_code=401, detail="Invalid signature")

    try:
        # sync ORM work, kept off the event loop
        return await asyncio.to_thread(payments.handle_notification, db, payload)
    except SQLAlchemyError:
        db.rollback()
        logger.error("Failed to update order from notification", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update order")
