# storefront/services/catalog_service.py
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError, ConflictError, ValidationError
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MAX_PAGE_SIZE = 100


def slugify(text: str) -> str:
    slug = text.strip().lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w\-]+", "", slug)
    return re.sub(r"\-\-+", "-", slug)


class CatalogService:
    """
    Katalog: produkty i kategorie.
    Zapisy tylko przez admina, stan magazynu zmniejsza wylacznie StockReconciler.
    """

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    #query
    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        featured: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> dict:
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)
        products, total = self.repo.list_products(
            category=category or None,
            search=search or None,
            featured=featured,
            limit=limit,
            offset=offset,
        )
        return {"products": products, "total": total, "limit": limit, "offset": offset}

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_categories(self) -> list[dict]:
        return [
            {
                "id": category.id,
                "name": category.name,
                "slug": category.slug,
                "description": category.description,
                "image": category.image,
                "product_count": count,
            }
            for category, count in self.repo.list_categories_with_counts()
        ]

    #commands
    def create_product(self, payload: ProductCreate) -> ProductModel:
        slug = self._unique_slug(payload.name)
        self._require_category(payload.category_id)

        try:
            product = self.repo.add_product(
                ProductModel(
                    name=payload.name,
                    slug=slug,
                    description=payload.description,
                    price=payload.price,
                    compare_price=payload.compare_price,
                    stock=payload.stock,
                    images=list(payload.images),
                    featured=payload.featured,
                    category_id=payload.category_id,
                )
            )
            self.repo.commit()
        except IntegrityError:
            # rownolegle utworzenie produktu o tym samym slugu
            self.repo.rollback()
            raise ConflictError("Product with this name already exists")

        logger.info(f"Utworzono produkt {product.id} ({slug})")
        return self.get_product(product.id)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("name") is not None:
            changes["slug"] = self._unique_slug(changes["name"], exclude_id=product.id)
        if changes.get("category_id") is not None:
            self._require_category(changes["category_id"])

        for field, value in changes.items():
            #pola wymagane w bazie nie moga dostac NULL z PATCH
            if value is None and field != "compare_price":
                continue
            setattr(product, field, value)

        try:
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise ConflictError("Product with this name already exists")

        logger.info(f"Zaktualizowano produkt {product.id}: {sorted(changes)}")
        return self.get_product(product.id)

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.repo.delete_product(product)
        self.repo.commit()
        logger.info(f"Usunieto produkt {product_id}")

    def _unique_slug(self, name: str, exclude_id: int | None = None) -> str:
        slug = slugify(name)
        if not slug:
            raise ValidationError("Name must contain letters or digits")

        existing = self.repo.get_product_by_slug(slug)
        if existing and existing.id != exclude_id:
            raise ConflictError("Product with this name already exists")
        return slug

    def _require_category(self, category_id: int):
        if not self.repo.get_category(category_id):
            raise ValidationError("Category does not exist")
