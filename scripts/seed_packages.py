# scripts/seed_packages.py
# Seeds the Bronze/Silver/Gold catalog and optionally an admin account.
import argparse
import logging

from sqlalchemy import select

from decorbook.core.config import settings
from decorbook.core.security import get_password_hash
from decorbook.db.base import Base
from decorbook.db.session import build_engine, build_session_factory
from decorbook.models.package import Package
from decorbook.models.user import User, RoleEnum
from decorbook.services import catalog

import decorbook.models.schedule
import decorbook.models.order

logger = logging.getLogger(__name__)

PACKAGES = [
    {
        "name": "Bronze Package",
        "description": "Paket ekonomis untuk acara intim dan minimalis.",
        "price": 20_000_000,
        "items": [
            {"name": "Dekorasi Pelaminan 4m", "price": 10_000_000},
            {"name": "Makeup & Busana", "price": 5_000_000},
            {"name": "Dokumentasi (1 Fotografer)", "price": 5_000_000},
        ],
    },
    {
        "name": "Silver Package",
        "description": "Paket lengkap untuk acara menengah dengan fasilitas premium.",
        "price": 150_000_000,
        "items": [
            {"name": "Dekorasi Pelaminan 8m & Fresh Flower", "price": 60_000_000},
            {"name": "Catering 500 Pax", "price": 50_000_000},
            {"name": "Tenda & Alat Pesta Pro", "price": 25_000_000},
            {"name": "Sound System & Entertainment", "price": 15_000_000},
        ],
    },
    {
        "name": "Gold Package",
        "description": "Paket Luxury eksklusif untuk acara megah di Ballroom.",
        "price": 500_000_000,
        "items": [
            {"name": "Sewa Ballroom Hotel Bintang 5", "price": 200_000_000},
            {"name": "Catering 1000 Pax Luxury Menu", "price": 150_000_000},
            {"name": "Dekorasi Full Area & Lighting", "price": 100_000_000},
            {"name": "Bintang Tamu / Artis", "price": 50_000_000},
        ],
    },
]

def main():
    parser = argparse.ArgumentParser(description="Seed the package catalog")
    parser.add_argument("--admin-email", help="Also create an admin account with this email")
    parser.add_argument("--admin-password", help="Password for the admin account")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL)
    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    SessionLocal = build_session_factory(engine)

    with SessionLocal() as db:
        for pkg in PACKAGES:
            if db.scalar(select(Package).where(Package.name == pkg["name"])):
                logger.info(f"Package {pkg['name']} already exists, skipping")
                continue
            catalog.create_package(db, name=pkg["name"], description=pkg["description"],
                                   price=pkg["price"], items=pkg["items"])

        if args.admin_email and args.admin_password:
            if not db.scalar(select(User).where(User.email == args.admin_email)):
                db.add(User(name="Admin", email=args.admin_email,
                            hashed_password=get_password_hash(args.admin_password), role=RoleEnum.admin))
                db.commit()
                logger.info(f"Admin {args.admin_email} created")

    engine.dispose()
    logger.info("Seeding finished")

if __name__ == '__main__':
    main()
