from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import ConflictError, NotFoundError, InsufficientStockError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs dla koszyka uzytkownika
    commands (add, update, remove, clear) modyfikuja stan
    query (get) tylko odczyt

    Koszyk nie rezerwuje towaru, stan magazynu jest tylko sprawdzany.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        items = self.repo.get_cart_items(user_id)

        #cena zawsze z produktu na zywo, to tylko wycena a nie zobowiazanie
        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        return {
            "items": items,
            "total": total,
            "count": len(items),
        }

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int = 1) -> CartItemModel:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")

        product = self.catalog.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        existing_item = self.repo.get_cart_item_by_product(user_id, product_id)
        requested = quantity + (existing_item.quantity if existing_item else 0)

        if product.stock < requested:
            raise InsufficientStockError(product.name)

        if existing_item:
            logger.info(
                f"Produkt {product_id} juz jest w koszyku uzytkownika {user_id}, zwiekszam ilosc "
                f"z {existing_item.quantity} do {requested}"
            )
            existing_item.quantity = requested
            item = existing_item
        else:
            logger.info(f"Dodaje nowy produkt {product_id} do koszyka uzytkownika {user_id}")
            item = CartItemModel(user_id=user_id, product_id=product_id, quantity=quantity)
            self.repo.add_cart_item(item)

        try:
            self.repo.commit()
        except IntegrityError:
            # rownolegly pierwszy add tego samego produktu, unique (user, product) wygral
            self.repo.rollback()
            return self._increment_after_race(user_id, product_id, quantity)

        return self.repo.get_cart_item(item.id)

    def _increment_after_race(self, user_id: int, product_id: int, quantity: int) -> CartItemModel:
        item = self.repo.get_cart_item_by_product(user_id, product_id)
        if not item:
            raise ConflictError("Cart was modified concurrently, please retry")
        product = self.catalog.get_product(product_id)
        if product.stock < item.quantity + quantity:
            raise InsufficientStockError(product.name)

        item.quantity += quantity
        self.repo.commit()
        logger.info(f"Konflikt przy dodawaniu produktu {product_id}, zwiekszono istniejaca pozycje {item.id}")
        return self.repo.get_cart_item(item.id)

    def update_quantity(self, user_id: int, item_id: int, quantity: int) -> CartItemModel:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive")

        item = self._owned_item(user_id, item_id)

        if item.product.stock < quantity:
            raise InsufficientStockError(item.product.name)

        logger.info(f"Pozycja {item_id}: ilosc {item.quantity} -> {quantity}")
        item.quantity = quantity
        self.repo.commit()

        return self.repo.get_cart_item(item_id)

    def remove_item(self, user_id: int, item_id: int) -> None:
        item = self._owned_item(user_id, item_id)

        logger.info(f"Usuwanie pozycji {item_id} z koszyka uzytkownika {user_id}")
        self.repo.delete_cart_item(item)
        self.repo.commit()

    def clear_cart(self, user_id: int) -> int:
        removed = self.repo.clear_cart(user_id)
        self.repo.commit()

        logger.info(f"Wyczyszczono koszyk uzytkownika {user_id} ({removed} pozycji)")
        return removed

    def _owned_item(self, user_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_cart_item(item_id)

        # cudza pozycja wyglada tak samo jak nieistniejaca
        if not item or item.user_id != user_id:
            raise NotFoundError("Cart item not found")
        return item
