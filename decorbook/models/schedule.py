# decorbook/models/schedule.py
# Schedule model: one row per booked calendar day. The unique date is what blocks double booking.
from sqlalchemy import Column, Integer, Date, DateTime
from datetime import datetime
from decorbook.db.base import Base

class Schedule(Base):
    __tablename__ = "schedules"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(Date, unique=True, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
