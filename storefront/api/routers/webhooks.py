# storefront/api/routers/webhooks.py
from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from storefront.api.deps import get_payment_gateway, get_raw_body
from storefront.data.database import get_db
from storefront.domain.schemas import WebhookAck
from storefront.services.payment_gateway import PaymentGateway
from storefront.services.stock_reconciler import StockReconciler
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/payment", response_model=WebhookAck)
def payment_webhook(
    payload: bytes = Depends(get_raw_body),
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Callback procesora platnosci. Bez sesji uzytkownika, zaufanie tylko przez podpis.
    Blad przetwarzania zwraca 500, procesor ponowi dostawe.
    """
    event = gateway.verify_callback(payload, stripe_signature)
    logger.info(f"Webhook {event.event_type} ({event.event_id}) dla zamowienia {event.order_id}")

    StockReconciler(db).handle_event(event)
    return {"received": True}
