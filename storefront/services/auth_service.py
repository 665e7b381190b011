# storefront/services/auth_service.py
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel, UserRole
from storefront.domain.errors import AuthenticationError, ConflictError
from storefront.domain.schemas import SignupIn, LoginIn
from storefront.repos.user_repo import UserRepo
from storefront.utils.security import hash_password, verify_password, sign_token, verify_token
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AuthService:
    """
    Authenticator: rejestracja, logowanie i weryfikacja tokenow.
    Reszta systemu widzi tylko ``authenticate(token) -> UserModel``.
    """

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def signup(self, payload: SignupIn) -> tuple[UserModel, str]:
        email = payload.email.lower()
        if self.repo.get_by_email(email):
            raise ConflictError("User with this email already exists")

        try:
            user = self.repo.create_user(
                UserModel(
                    email=email,
                    name=payload.name,
                    password_hash=hash_password(payload.password),
                    role=UserRole.CUSTOMER.value,
                )
            )
        except IntegrityError:
            # rownolegla rejestracja na ten sam email, unique na kolumnie wygral
            self.repo.rollback()
            raise ConflictError("User with this email already exists")

        logger.info(f"Utworzono uzytkownika {user.id}")
        return user, sign_token(user.id, user.role)

    def login(self, payload: LoginIn) -> tuple[UserModel, str]:
        user = self.repo.get_by_email(payload.email.lower())

        #ten sam komunikat dla zlego maila i zlego hasla
        if not user or not verify_password(payload.password, user.password_hash):
            logger.info("Nieudana proba logowania")
            raise AuthenticationError("Invalid email or password")

        logger.info(f"Uzytkownik {user.id} zalogowany")
        return user, sign_token(user.id, user.role)

    def authenticate(self, token: str | None) -> UserModel:
        if not token:
            raise AuthenticationError()

        claims = verify_token(token)
        if not claims:
            raise AuthenticationError()

        user = self.repo.get_user(claims["sub"])
        if not user:
            raise AuthenticationError()
        return user
