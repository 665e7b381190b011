# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import OrderOut, OrderListOut
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.get("", response_model=OrderListOut)
def list_orders(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Klient widzi swoje zamowienia, admin wszystkie.
    """
    return {"orders": get_service(db).list_orders(user)}


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Pobiera szczegoly zamowienia (wlasciciel albo admin).
    """
    return get_service(db).get_order(order_id, user)
