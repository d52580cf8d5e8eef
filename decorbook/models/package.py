# decorbook/models/package.py
# Catalog models: Package and its ordered PackageItem rows.
from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from decorbook.db.base import Base

class Package(Base):
    __tablename__ = "packages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(BigInteger, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    package_items = relationship(
        "PackageItem",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="PackageItem.id",
    )

class PackageItem(Base):
    __tablename__ = "package_items"

    id = Column(Integer, primary_key=True, index=True)
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    price = Column(BigInteger, nullable=False)

    package = relationship("Package", back_populates="package_items")
