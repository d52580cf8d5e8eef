# decorbook/models/user.py
# User model: name, email, hashed_password, role.
from sqlalchemy import Column, Integer, String, DateTime, Enum
from datetime import datetime
from decorbook.db.base import Base
import enum

class RoleEnum(str, enum.Enum):
    user = "USER"
    admin = "ADMIN"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(RoleEnum), default=RoleEnum.user, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
