# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_payment_gateway
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CheckoutIn, CheckoutOut
from storefront.services.checkout_service import CheckoutService
from storefront.services.payment_gateway import PaymentGateway

router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post("", response_model=CheckoutOut)
def checkout(
    payload: CheckoutIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    """
    Tworzy zamowienie PENDING z koszyka i sesje platnosci.
    Koszyk zostaje nietkniety do potwierdzenia platnosci.
    """
    return CheckoutService(db, gateway).checkout(user.id, payload.shipping_address)
