# storefront/services/stock_reconciler.py
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderStatus
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.services.payment_gateway import PaymentEvent, PaymentEventKind
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class StockReconciler:
    """
    Reaguje wylacznie na zweryfikowane eventy platnosci.

    Maszyna stanow zamowienia:
        PENDING --(SessionCompleted)--> PROCESSING  (stock -= qty, koszyk czyszczony)
        PENDING --(SessionExpired)----> CANCELLED
    Z PROCESSING i CANCELLED nie ma przejsc. Kazdy event mozna dostarczyc
    wielokrotnie, powtorka jest no-opem bo przejscie jest warunkowe na statusie.
    Event z obca sesja albo referencja (inne srodowisko, to samo konto Stripe)
    jest ignorowany tak jak event dla nieznanego zamowienia.
    """

    def __init__(self, db: Session, notifications: NotificationService | None = None):
        self.orders = OrderRepo(db)
        self.catalog = CatalogRepo(db)
        self.carts = CartRepo(db)
        self.notifications = notifications or NotificationService()

    def handle_event(self, event: PaymentEvent) -> bool:
        """Zwraca True jesli event zmienil stan."""
        if event.kind is PaymentEventKind.OTHER:
            logger.info(f"Nieobslugiwany typ eventu {event.event_type} ({event.event_id}), ignoruje")
            return False

        order_id = self._parse_order_id(event.order_id)
        if order_id is None:
            logger.warning(f"Event {event.event_id} ({event.event_type}) bez poprawnego orderId, ignoruje")
            return False

        if not self._belongs_here(order_id, event):
            return False

        if event.kind is PaymentEventKind.SESSION_COMPLETED:
            return self.complete_order(order_id, event.session_id)
        return self.expire_order(order_id, event.session_id)

    def _belongs_here(self, order_id: int, event: PaymentEvent) -> bool:
        # orderId jest sekwencyjny, ten sam numer moze przyjsc z innego srodowiska
        order = self.orders.get_order(order_id)
        if order is None:
            logger.info(f"{event.event_type}: zamowienie {order_id} nieznane, traktuje jako obsluzone")
            return False
        if event.order_reference is not None and event.order_reference != order.reference:
            logger.warning(
                f"{event.event_type} ({event.event_id}): referencja {event.order_reference} "
                f"nie pasuje do zamowienia {order_id}, ignoruje"
            )
            return False
        if order.payment_session_id is not None and event.session_id != order.payment_session_id:
            logger.warning(
                f"{event.event_type} ({event.event_id}): sesja {event.session_id} "
                f"nie nalezy do zamowienia {order_id}, ignoruje"
            )
            return False
        return True

    def complete_order(self, order_id: int, session_id: str | None = None) -> bool:
        try:
            # przejscie statusu, zmniejszenie stanu i czyszczenie koszyka w jednej transakcji
            rowcount = self.orders.transition_status(
                order_id, OrderStatus.PENDING, OrderStatus.PROCESSING, session_id=session_id
            )
            if rowcount == 0:
                self.orders.rollback()
                self._log_skipped(order_id, "SessionCompleted")
                return False

            order = self.orders.get_order(order_id)
            for item in order.items:
                if item.product_id is None:
                    logger.warning(f"Zamowienie {order_id}: produkt '{item.product_name}' usuniety, pomijam stan")
                    continue
                if self.catalog.decrement_stock(item.product_id, item.quantity) == 0:
                    logger.warning(f"Zamowienie {order_id}: produkt {item.product_id} nie istnieje, pomijam stan")

            cleared = self.carts.clear_cart(order.user_id)
            self.orders.commit()
        except Exception:
            self.orders.rollback()
            logger.exception(f"Rekoncyliacja zamowienia {order_id} nie powiodla sie")
            raise

        logger.info(
            f"Zamowienie {order_id} oplacone: PROCESSING, stan zmniejszony dla "
            f"{len(order.items)} pozycji, usunieto {cleared} pozycji koszyka"
        )
        self.notifications.send_order_notification(order.user_id, order.id)
        return True

    def expire_order(self, order_id: int, session_id: str | None = None) -> bool:
        try:
            rowcount = self.orders.transition_status(
                order_id, OrderStatus.PENDING, OrderStatus.CANCELLED, session_id=session_id
            )
            if rowcount == 0:
                self.orders.rollback()
                self._log_skipped(order_id, "SessionExpired")
                return False
            self.orders.commit()
        except Exception:
            self.orders.rollback()
            logger.exception(f"Anulowanie zamowienia {order_id} nie powiodlo sie")
            raise

        logger.info(f"Zamowienie {order_id} wygaslo: CANCELLED")
        return True

    def _log_skipped(self, order_id: int, kind: str):
        order = self.orders.get_order(order_id)
        if order is None:
            logger.info(f"{kind}: zamowienie {order_id} nieznane, traktuje jako obsluzone")
        else:
            logger.info(f"{kind}: zamowienie {order_id} ma status {order.status}, nic do zrobienia")

    @staticmethod
    def _parse_order_id(raw) -> int | None:
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None
