#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w Base.metadata

from storefront.data.models.user import UserModel, UserRole
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "UserRole",
    "CategoryModel",
    "ProductModel",
    "CartItemModel",
    "OrderModel",
    "OrderStatus",
    "OrderItemModel",
]
