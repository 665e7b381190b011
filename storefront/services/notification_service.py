# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        """
        Wysyla powiadomienie o rozpoczeciu realizacji zamowienia.
        Blad kolejki nie cofa juz zatwierdzonej platnosci.
        """
        try:
            send_order_notification_task.delay(user_id, order_id)
        except Exception as e:
            logger.error(f"Nie udalo sie zakolejkowac powiadomienia dla zamowienia {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    """
    Celery task - w prawdziwym systemie wyslalby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is being processed")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
