# storefront/services/order_service.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.user import UserModel, UserRole
from storefront.domain.errors import NotFoundError, AuthorizationError
from storefront.repos.order_repo import OrderRepo


class OrderService:
    """
    Odczyt zamowien (query). Zamowienia tworzy CheckoutService,
    status zmienia tylko StockReconciler.
    """

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def list_orders(self, user: UserModel) -> list[OrderModel]:
        if user.role == UserRole.ADMIN.value:
            return self.repo.list_orders()
        return self.repo.list_orders(user_id=user.id)

    def get_order(self, order_id: int, user: UserModel) -> OrderModel:
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFoundError("Order not found")

        if order.user_id != user.id and user.role != UserRole.ADMIN.value:
            raise AuthorizationError("Unauthorized")

        return order
