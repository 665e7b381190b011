# storefront/repos/catalog_repo.py
from sqlalchemy import select, update, delete, func, or_
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order_item import OrderItemModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # produkty
    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel)
            .options(joinedload(ProductModel.category))
            .where(ProductModel.id == product_id)
        ).scalar_one_or_none()

    def get_product_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def list_products(
        self,
        category: str | None = None,
        search: str | None = None,
        featured: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[ProductModel], int]:
        conditions = []
        if category:
            conditions.append(ProductModel.category.has(CategoryModel.slug == category))
        if search:
            pattern = f"%{search}%"
            conditions.append(
                or_(ProductModel.name.ilike(pattern), ProductModel.description.ilike(pattern))
            )
        if featured:
            conditions.append(ProductModel.featured.is_(True))

        products = self.db.execute(
            select(ProductModel)
            .options(joinedload(ProductModel.category))
            .where(*conditions)
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .limit(limit)
            .offset(offset)
        ).scalars().all()

        total = self.db.execute(
            select(func.count(ProductModel.id)).where(*conditions)
        ).scalar_one()

        return list(products), total

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        # koszyki traca pozycje, zamowienia zachowuja snapshot bez referencji
        self.db.execute(delete(CartItemModel).where(CartItemModel.product_id == product.id))
        self.db.execute(
            update(OrderItemModel)
            .where(OrderItemModel.product_id == product.id)
            .values(product_id=None)
        )
        self.db.delete(product)

    def decrement_stock(self, product_id: int, quantity: int) -> int:
        """
        Atomowe UPDATE products SET stock = stock - :q WHERE id = :id.
        Bez podlogi na zerze, zwraca rowcount (0 gdy produkt nie istnieje).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(stock=ProductModel.stock - quantity)
        )
        return result.rowcount

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    # kategorie
    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_categories_with_counts(self) -> list[tuple[CategoryModel, int]]:
        rows = self.db.execute(
            select(CategoryModel, func.count(ProductModel.id))
            .outerjoin(ProductModel, ProductModel.category_id == CategoryModel.id)
            .group_by(CategoryModel.id)
            .order_by(CategoryModel.name.asc())
        ).all()
        return [(category, count) for category, count in rows]

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
