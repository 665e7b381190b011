# storefront/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel, UserRole
from storefront.domain.errors import AuthorizationError
from storefront.services.auth_service import AuthService
from storefront.services.payment_gateway import PaymentGateway
from storefront.utils.settings import AUTH_COOKIE_NAME


def get_payment_gateway() -> PaymentGateway:
    return PaymentGateway()


def get_token(request: Request) -> str | None:
    #najpierw cookie, potem naglowek Authorization: Bearer
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if token:
        return token

    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def get_current_user(
    token: str | None = Depends(get_token),
    db: Session = Depends(get_db),
) -> UserModel:
    return AuthService(db).authenticate(token)


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != UserRole.ADMIN.value:
        raise AuthorizationError("Unauthorized")
    return user


async def get_raw_body(request: Request) -> bytes:
    # dokladne bajty do weryfikacji podpisu, bez ponownej serializacji JSON
    return await request.body()
