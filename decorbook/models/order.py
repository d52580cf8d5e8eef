# decorbook/models/order.py
# Order model with amounts, the overall status and the two payment legs (deposit and balance).
from sqlalchemy import Column, Integer, BigInteger, String, Text, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from datetime import datetime
from decorbook.db.base import Base
import enum
import uuid

class OrderStatus(str, enum.Enum):
    pending = "PENDING"
    dp_paid = "DP_PAID"
    in_progress = "IN_PROGRESS"
    finished = "FINISHED"
    completed = "COMPLETED"
    cancelled = "CANCELLED"

class PaymentStatus(str, enum.Enum):
    pending = "PENDING"
    paid = "PAID"
    failed = "FAILED"

def new_order_id() -> str:
    return uuid.uuid4().hex

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=new_order_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False)
    schedule_id = Column(Integer, ForeignKey("schedules.id"), nullable=False)
    schedule_date = Column(Date, nullable=False)

    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_address = Column(Text, nullable=False)

    total_amount = Column(BigInteger, nullable=False)
    dp_amount = Column(BigInteger, nullable=False)
    final_amount = Column(BigInteger, nullable=False)

    status = Column(Enum(OrderStatus), default=OrderStatus.pending, nullable=False)
    dp_status = Column(Enum(PaymentStatus), default=PaymentStatus.pending, nullable=False)
    final_status = Column(Enum(PaymentStatus), default=PaymentStatus.pending, nullable=False)

    dp_transaction_id = Column(String, nullable=True)
    final_transaction_id = Column(String, nullable=True)

    # last notification applied by the gateway callback
    transaction_status = Column(String, nullable=True)
    fraud_status = Column(String, nullable=True)
    payment_type = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    dp_paid_at = Column(DateTime, nullable=True)
    final_paid_at = Column(DateTime, nullable=True)

    user = relationship("User")
    package = relationship("Package")
    schedule = relationship("Schedule")
