# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import ProductCreate, ProductUpdate, ProductOut, ProductListOut, MessageOut
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("", response_model=ProductListOut)
def list_products(
    category: str | None = Query(None, description="slug kategorii"),
    search: str | None = Query(None),
    featured: bool = Query(False),
    limit: int = Query(50),
    offset: int = Query(0),
    db: Session = Depends(get_db),
):
    return get_service(db).list_products(
        category=category,
        search=search,
        featured=featured,
        limit=limit,
        offset=offset,
    )


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    payload: ProductCreate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).create_product(payload)


@router.patch("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).update_product(product_id, payload)


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    get_service(db).delete_product(product_id)
    return {"message": "Product deleted successfully"}
