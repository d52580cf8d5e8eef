# decorbook/api/schedules.py
# Date availability routes.
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from decorbook.api.schemas import ScheduleCheck
from decorbook.core.security import get_current_user
from decorbook.db.session import get_db
from decorbook.models.user import User
from decorbook.services import booking

router = APIRouter()

@router.post("/check")
def check_date(body: ScheduleCheck, db: Session = Depends(get_db),
               current_user: User = Depends(get_current_user)):
    return {"isBooked": booking.is_date_booked(db, booking.to_day(body.date))}

@router.get("/list")
def booked_dates(db: Session = Depends(get_db)):
    return {"bookedDates": [d.isoformat() for d in booking.list_booked_dates(db)]}
