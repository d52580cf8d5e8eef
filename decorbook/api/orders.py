# decorbook/api/orders.py
# Booking routes: create an order for a date, list own orders, order detail.
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from decorbook.api.schemas import OrderCreate, OrderDetail, OrderListItem
from decorbook.core.security import get_current_user
from decorbook.db.session import get_db
from decorbook.models.user import User
from decorbook.services import booking

router = APIRouter()

@router.post("/create", status_code=status.HTTP_201_CREATED)
def create_order(body: OrderCreate, db: Session = Depends(get_db),
                 current_user: User = Depends(get_current_user)):
    """Book a package; 409 when the date is already taken."""
    order = booking.create_order(
        db,
        current_user,
        package_id=body.packageId,
        schedule_date=body.scheduleDate,
        customer_name=body.customerName,
        customer_email=body.customerEmail,
        customer_phone=body.customerPhone,
        customer_address=body.customerAddress,
    )
    return {
        "message": "Order created",
        "orderId": order.id,
        "dpAmount": order.dp_amount,
        "finalAmount": order.final_amount,
    }

@router.get("", response_model=list[OrderListItem])
def list_orders(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return booking.list_orders_for_user(db, current_user.id)

@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: str, db: Session = Depends(get_db),
              current_user: User = Depends(get_current_user)):
    return booking.get_order_for(db, order_id, current_user)
