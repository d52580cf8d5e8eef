# decorbook/services/catalog.py
# Catalog: packages and their items. Admin edits replace the whole item list.

import logging
from typing import Any, Iterable, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from decorbook.core.errors import ConflictError, NotFoundError, ValidationError
from decorbook.models.order import Order
from decorbook.models.package import Package, PackageItem

logger = logging.getLogger(__name__)


def list_packages(db: Session, by_name: bool = False) -> list[Package]:
    stmt = select(Package).options(selectinload(Package.package_items))
    stmt = stmt.order_by(Package.name.asc()) if by_name else stmt.order_by(Package.id)
    return list(db.scalars(stmt))


def get_package(db: Session, package_id: int) -> Package:
    stmt = (
        select(Package)
        .options(selectinload(Package.package_items))
        .where(Package.id == package_id)
    )
    package = db.scalar(stmt)
    if package is None:
        raise NotFoundError("Package not found")
    return package


def _check_price(value: int, what: str) -> int:
    if value is None or value < 0:
        raise ValidationError(f"{what} must be a non-negative integer")
    return int(value)


def _build_items(items: Iterable[Any]) -> list[PackageItem]:
    built = []
    for item in items:
        name = item["name"] if isinstance(item, dict) else item.name
        price = item["price"] if isinstance(item, dict) else item.price
        if not name:
            raise ValidationError("Package item name is required")
        built.append(PackageItem(name=name, price=_check_price(price, "Package item price")))
    return built


def create_package(
    db: Session,
    name: str,
    price: int,
    description: Optional[str] = None,
    items: Iterable[Any] = (),
) -> Package:
    if not name:
        raise ValidationError("Name and price are required")
    package = Package(
        name=name,
        description=description or None,
        price=_check_price(price, "Price"),
    )
    package.package_items = _build_items(items)
    db.add(package)
    db.commit()
    logger.info(f"Package {package.id} created: {package.name}")
    return get_package(db, package.id)


def replace_package(db: Session, package_id: int, items: Iterable[Any] = (), **updates) -> Package:
    """
    Update package fields and replace its whole item list.

    Only fields present in ``updates`` are changed; the items are always
    deleted and re-inserted, inside the same transaction.
    """
    package = db.get(Package, package_id)
    if package is None:
        raise NotFoundError("Package not found")

    if updates.get("name"):
        package.name = updates["name"]
    if "description" in updates:
        package.description = updates["description"]
    if updates.get("price") is not None:
        package.price = _check_price(updates["price"], "Price")

    new_items = _build_items(items)
    db.execute(delete(PackageItem).where(PackageItem.package_id == package_id))
    db.expire(package, ["package_items"])
    for item in new_items:
        item.package_id = package_id
        db.add(item)
    db.commit()
    db.expire(package)

    logger.info(f"Package {package_id} updated with {len(new_items)} items")
    return get_package(db, package_id)


def delete_package(db: Session, package_id: int) -> None:
    package = db.get(Package, package_id)
    if package is None:
        raise NotFoundError("Package not found")
    in_use = db.scalar(select(Order.id).where(Order.package_id == package_id).limit(1))
    if in_use is not None:
        raise ConflictError("Package has orders and cannot be deleted")
    db.delete(package)
    db.commit()
    logger.info(f"Package {package_id} deleted")
