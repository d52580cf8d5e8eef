# decorbook/api/packages.py
# Public catalog routes.
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from decorbook.api.schemas import PackageResponse
from decorbook.db.session import get_db
from decorbook.services import catalog

router = APIRouter()

@router.get("", response_model=list[PackageResponse])
def list_packages(db: Session = Depends(get_db)):
    return catalog.list_packages(db)

@router.get("/{package_id}", response_model=PackageResponse)
def get_package(package_id: int, db: Session = Depends(get_db)):
    return catalog.get_package(db, package_id)
