# storefront/services/payment_gateway.py
import enum
import json
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

import stripe

from storefront.data.models.order import OrderModel
from storefront.domain.errors import ExternalServiceError, SignatureError
from storefront.utils.retry import stripe_retry
from storefront.utils.settings import (
    APP_URL,
    PAYMENT_CURRENCY,
    STRIPE_SECRET_KEY,
    STRIPE_WEBHOOK_SECRET,
    STRIPE_WEBHOOK_TOLERANCE,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SESSION_COMPLETED = "checkout.session.completed"
SESSION_EXPIRED = "checkout.session.expired"


class PaymentEventKind(str, enum.Enum):
    SESSION_COMPLETED = "SESSION_COMPLETED"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    OTHER = "OTHER"


@dataclass(frozen=True)
class PaymentSession:
    session_id: str
    redirect_url: str | None


@dataclass(frozen=True)
class PaymentEvent:
    kind: PaymentEventKind
    event_id: str | None
    event_type: str
    order_id: str | None = None
    order_reference: str | None = None
    session_id: str | None = None


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentGateway:
    """
    Adapter na Stripe Checkout.

    create_session - request/response, nic nie zapisuje lokalnie
    verify_callback - jedyna granica zaufania dla webhookow
    """

    def __init__(
        self,
        api_key: str | None = None,
        webhook_secret: str | None = None,
        tolerance: int = STRIPE_WEBHOOK_TOLERANCE,
        currency: str = PAYMENT_CURRENCY,
        app_url: str = APP_URL,
    ):
        self.api_key = api_key if api_key is not None else STRIPE_SECRET_KEY
        self.webhook_secret = webhook_secret if webhook_secret is not None else STRIPE_WEBHOOK_SECRET
        self.tolerance = tolerance
        self.currency = currency
        self.app_url = app_url.rstrip("/")

    def build_line_items(self, order: OrderModel) -> list[dict]:
        return [
            {
                "price_data": {
                    "currency": self.currency,
                    "product_data": {"name": item.product_name},
                    "unit_amount": to_minor_units(item.price),
                },
                "quantity": item.quantity,
            }
            for item in order.items
        ]

    def create_session(self, order: OrderModel, line_items: list[dict]) -> PaymentSession:
        logger.info(f"Tworzenie sesji platnosci dla zamowienia {order.id}")
        try:
            session = self._create_checkout_session(order, line_items)
        except stripe.StripeError as e:
            logger.error(f"Stripe odrzucil sesje dla zamowienia {order.id}: {e}")
            raise ExternalServiceError("Payment provider rejected the request") from e

        logger.info(f"Sesja {session.id} utworzona dla zamowienia {order.id}")
        return PaymentSession(session_id=session.id, redirect_url=session.url)

    @stripe_retry()
    def _create_checkout_session(self, order: OrderModel, line_items: list[dict]):
        # klucz z losowej referencji, nie koliduje po resecie bazy ani miedzy srodowiskami
        return stripe.checkout.Session.create(
            api_key=self.api_key,
            idempotency_key=f"checkout-{order.reference}",
            mode="payment",
            payment_method_types=["card"],
            line_items=line_items,
            success_url=f"{self.app_url}/orders/{order.id}?success=true",
            cancel_url=f"{self.app_url}/checkout?canceled=true",
            client_reference_id=str(order.id),
            metadata={"orderId": str(order.id), "orderReference": order.reference},
        )

    def verify_callback(self, raw_payload: bytes, signature_header: str | None) -> PaymentEvent:
        if not signature_header or not self.webhook_secret:
            logger.warning("Webhook bez podpisu albo bez skonfigurowanego sekretu")
            raise SignatureError()

        try:
            payload = raw_payload.decode("utf-8")
            stripe.WebhookSignature.verify_header(
                payload, signature_header, self.webhook_secret, self.tolerance
            )
            event = json.loads(payload)
        except (stripe.SignatureVerificationError, UnicodeDecodeError, ValueError) as e:
            logger.warning(f"Weryfikacja podpisu webhooka nie powiodla sie: {e}")
            raise SignatureError() from e

        if not isinstance(event, dict):
            raise SignatureError("Malformed event")

        return self._to_event(event)

    @staticmethod
    def _to_event(event: dict) -> PaymentEvent:
        event_type = str(event.get("type", ""))
        obj = (event.get("data") or {}).get("object") or {}
        metadata = obj.get("metadata") or {}

        if event_type == SESSION_COMPLETED:
            kind = PaymentEventKind.SESSION_COMPLETED
        elif event_type == SESSION_EXPIRED:
            kind = PaymentEventKind.SESSION_EXPIRED
        else:
            kind = PaymentEventKind.OTHER

        return PaymentEvent(
            kind=kind,
            event_id=event.get("id"),
            event_type=event_type,
            order_id=metadata.get("orderId"),
            order_reference=metadata.get("orderReference"),
            session_id=obj.get("id"),
        )
