# storefront/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CartItemIn, CartItemUpdate, CartItemOut, CartOut, MessageOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return get_service(db).get_cart(user.id)


@router.post("", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).add_item(user.id, payload.product_id, payload.quantity)


@router.patch("/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: int,
    payload: CartItemUpdate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).update_quantity(user.id, item_id, payload.quantity)


@router.delete("/{item_id}", response_model=MessageOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_service(db).remove_item(user.id, item_id)
    return {"message": "Item removed from cart"}


@router.delete("", response_model=MessageOut)
def clear_cart(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    get_service(db).clear_cart(user.id)
    return {"message": "Cart cleared successfully"}
