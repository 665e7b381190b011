# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import SignupIn, LoginIn, AuthOut, UserOut, MessageOut
from storefront.services.auth_service import AuthService
from storefront.utils.settings import AUTH_COOKIE_NAME, AUTH_COOKIE_SECURE, AUTH_TOKEN_TTL_SECONDS

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_token_cookie(response: Response, token: str):
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=AUTH_COOKIE_SECURE,
        samesite="lax",
        max_age=AUTH_TOKEN_TTL_SECONDS,
    )


@router.post("/signup", response_model=AuthOut, status_code=201)
def signup(payload: SignupIn, response: Response, db: Session = Depends(get_db)):
    user, token = AuthService(db).signup(payload)
    _set_token_cookie(response, token)
    return {"user": user, "message": "User created successfully"}


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    user, token = AuthService(db).login(payload)
    _set_token_cookie(response, token)
    return {"user": user, "message": "Login successful"}


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    response.delete_cookie(AUTH_COOKIE_NAME)
    return {"message": "Logged out"}


@router.get("/me", response_model=UserOut)
def me(user: UserModel = Depends(get_current_user)):
    return user
