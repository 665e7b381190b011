# storefront/repos/cart_repo.py
from sqlalchemy import select, delete
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_items(self, user_id: int) -> list[CartItemModel]:
        #pozycje razem z produktem i kategoria, najnowsze pierwsze
        return list(
            self.db.execute(
                select(CartItemModel)
                .options(joinedload(CartItemModel.product).joinedload(ProductModel.category))
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
            ).scalars().all()
        )

    def get_cart_item(self, item_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel)
            .options(joinedload(CartItemModel.product).joinedload(ProductModel.category))
            .where(CartItemModel.id == item_id)
        ).scalar_one_or_none()

    def get_cart_item_by_product(self, user_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        return item

    def delete_cart_item(self, item: CartItemModel) -> None:
        self.db.delete(item)

    def clear_cart(self, user_id: int) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
