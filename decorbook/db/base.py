# decorbook/db/base.py
# Shared SQLAlchemy declarative base.
# This module must not import models, to avoid circular imports. Models import Base from here.

from sqlalchemy.orm import declarative_base

Base = declarative_base()
