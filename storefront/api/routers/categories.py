from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryListOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=CategoryListOut)
def list_categories(db: Session = Depends(get_db)):
    return {"categories": CatalogService(db).list_categories()}
