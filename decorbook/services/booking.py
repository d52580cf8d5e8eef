# decorbook/services/booking.py
# Booking: order creation together with its schedule row, the date conflict check and order lookups.

import logging
from datetime import date, datetime
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from decorbook.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from decorbook.models.order import Order, OrderStatus, PaymentStatus
from decorbook.models.package import Package
from decorbook.models.schedule import Schedule
from decorbook.models.user import RoleEnum, User
from decorbook.services.lifecycle import split_amount

logger = logging.getLogger(__name__)


def to_day(value: Union[date, datetime, str]) -> date:
    """Reduce a date, datetime or ISO string to a calendar day (time of day is ignored)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")


def is_date_booked(db: Session, day: date) -> bool:
    return db.scalar(select(Schedule.id).where(Schedule.date == day)) is not None


def list_booked_dates(db: Session) -> list[date]:
    return list(db.scalars(select(Schedule.date).order_by(Schedule.date)))


def create_order(
    db: Session,
    user: User,
    package_id: int,
    schedule_date: Union[date, datetime, str],
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    customer_address: str,
) -> Order:
    """
    Book a package for a date.

    The schedule row and the order are written in one transaction. The unique
    constraint on schedules.date decides between concurrent bookings of the
    same day; the loser gets a ConflictError.
    """
    day = to_day(schedule_date)

    package = db.get(Package, package_id)
    if package is None:
        raise NotFoundError("Package not found")

    if is_date_booked(db, day):
        logger.info(f"Date {day} already booked, rejecting order for user {user.id}")
        raise ConflictError(f"Date {day.isoformat()} is already booked")

    dp_amount, final_amount = split_amount(package.price)

    schedule = Schedule(date=day)
    db.add(schedule)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Concurrent booking lost the race for {day}")
        raise ConflictError(f"Date {day.isoformat()} is already booked")

    order = Order(
        user_id=user.id,
        package_id=package.id,
        schedule_id=schedule.id,
        schedule_date=day,
        customer_name=customer_name,
        customer_email=customer_email,
        customer_phone=customer_phone,
        customer_address=customer_address,
        total_amount=package.price,
        dp_amount=dp_amount,
        final_amount=final_amount,
        status=OrderStatus.pending,
        dp_status=PaymentStatus.pending,
        final_status=PaymentStatus.pending,
    )
    db.add(order)
    db.commit()
    db.refresh(order)

    logger.info(f"Order {order.id} created for user {user.id} on {day} (dp={dp_amount}, final={final_amount})")
    return order


def list_orders_for_user(db: Session, user_id: int) -> list[Order]:
    stmt = (
        select(Order)
        .options(selectinload(Order.package))
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc())
    )
    return list(db.scalars(stmt))


def get_order_for(db: Session, order_id: str, user: Optional[User]) -> Order:
    """Load an order the user may see: their own, or any order for an admin"""
    stmt = (
        select(Order)
        .options(selectinload(Order.package).selectinload(Package.package_items))
        .where(Order.id == order_id)
    )
    order = db.scalar(stmt)
    if order is None:
        raise NotFoundError("Order not found")
    if user is not None and order.user_id != user.id and user.role != RoleEnum.admin:
        raise PermissionDeniedError("Order belongs to another user")
    return order
