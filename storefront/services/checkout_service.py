# storefront/services/checkout_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import EmptyCartError, InsufficientStockError, ExternalServiceError
from storefront.domain.schemas import ShippingAddress
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.payment_gateway import PaymentGateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Zamiana koszyka w zamowienie z zamrozonymi cenami.

    1. pobiera koszyk z produktami
    2. sprawdza stan magazynu (tylko pre-flight, bez rezerwacji)
    3. liczy total z aktualnych cen
    4. zapisuje Order + OrderItems w jednej transakcji (status PENDING)
    5. tworzy sesje platnosci i zapisuje jej id na zamowieniu

    Koszyk NIE jest czyszczony, robi to dopiero StockReconciler po platnosci.
    """

    def __init__(self, db: Session, gateway: PaymentGateway):
        self.carts = CartRepo(db)
        self.orders = OrderRepo(db)
        self.gateway = gateway

    def checkout(self, user_id: int, shipping_address: ShippingAddress) -> dict:
        order = self._create_order(user_id, shipping_address)

        # poza transakcja, baza nie skoordynuje sie z wywolaniem sieciowym
        try:
            session = self.gateway.create_session(order, self.gateway.build_line_items(order))
        except ExternalServiceError:
            logger.error(f"Zamowienie {order.id} zostaje PENDING bez sesji platnosci")
            raise

        self.orders.set_payment_session(order, session.session_id)
        self.orders.commit()

        logger.info(f"Checkout zamowienia {order.id} gotowy, sesja {session.session_id}")
        return {
            "session_id": session.session_id,
            "session_url": session.redirect_url,
            "order_id": order.id,
        }

    def _create_order(self, user_id: int, shipping_address: ShippingAddress) -> OrderModel:
        items = self.carts.get_cart_items(user_id)
        if not items:
            raise EmptyCartError()

        for item in items:
            if item.product.stock < item.quantity:
                logger.info(
                    f"Checkout uzytkownika {user_id} odrzucony: produkt {item.product_id} "
                    f"ma {item.product.stock} szt., potrzeba {item.quantity}"
                )
                raise InsufficientStockError(item.product.name)

        total = sum((i.product.price * i.quantity for i in items), Decimal("0.00"))

        order = OrderModel(
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total=total,
            shipping_address=shipping_address.model_dump(),
            items=[
                OrderItemModel(
                    product_id=i.product_id,
                    product_name=i.product.name,
                    quantity=i.quantity,
                    # snapshot ceny, od teraz niezalezny od katalogu
                    price=i.product.price,
                )
                for i in items
            ],
        )

        try:
            self.orders.add_order(order)
            self.orders.commit()
        except Exception:
            self.orders.rollback()
            raise

        logger.info(f"Utworzono zamowienie {order.id} dla uzytkownika {user_id}, total {total}")
        return order
