# decorbook/api/admin.py
# Admin-only package management. Items are replaced wholesale on every edit.
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from decorbook.api.schemas import PackageCreate, PackageResponse, PackageUpdate
from decorbook.core.security import require_role
from decorbook.db.session import get_db
from decorbook.models.user import RoleEnum, User
from decorbook.services import catalog

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/packages")
def admin_packages(id: int | None = None, db: Session = Depends(get_db),
                   admin: User = Depends(require_role(RoleEnum.admin))):
    """All packages sorted by name, or a single one with ?id=."""
    if id is not None:
        return PackageResponse.model_validate(catalog.get_package(db, id))
    return [PackageResponse.model_validate(p) for p in catalog.list_packages(db, by_name=True)]

@router.post("/packages", status_code=status.HTTP_201_CREATED)
def create_package(body: PackageCreate, db: Session = Depends(get_db),
                   admin: User = Depends(require_role(RoleEnum.admin))):
    package = catalog.create_package(
        db,
        name=body.name,
        description=body.description,
        price=body.price,
        items=body.packageItems,
    )
    logger.info(f"Admin {admin.id} created package {package.id}")
    return {"message": "Package created", "package": PackageResponse.model_validate(package)}

@router.put("/packages")
def update_package(body: PackageUpdate, db: Session = Depends(get_db),
                   admin: User = Depends(require_role(RoleEnum.admin))):
    updates = body.model_dump(include=body.model_fields_set & {"name", "description", "price"})
    package = catalog.replace_package(db, body.id, items=body.packageItems, **updates)
    logger.info(f"Admin {admin.id} updated package {package.id}")
    return {"message": "Package updated", "package": PackageResponse.model_validate(package)}

@router.delete("/packages")
def delete_package(id: int, db: Session = Depends(get_db),
                   admin: User = Depends(require_role(RoleEnum.admin))):
    catalog.delete_package(db, id)
    logger.info(f"Admin {admin.id} deleted package {id}")
    return {"message": "Package deleted"}
