# storefront/domain/errors.py
"""
Bledy domenowe sklepu.

Serwisy rzucaja tylko te wyjatki, warstwa api mapuje je na kody HTTP
(patrz storefront/api/errors.py). Komunikat ``message`` jest widoczny dla klienta.
"""


class StorefrontError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid request"


class EmptyCartError(ValidationError):
    default_message = "Cart is empty"


class AuthenticationError(StorefrontError):
    status_code = 401
    default_message = "Not authenticated"


class AuthorizationError(StorefrontError):
    status_code = 403
    default_message = "Unauthorized"


class NotFoundError(StorefrontError):
    status_code = 404
    default_message = "Not found"


class ConflictError(StorefrontError):
    status_code = 400
    default_message = "Conflict"


class InsufficientStockError(ConflictError):
    def __init__(self, product_name: str):
        self.product_name = product_name
        super().__init__(f"Insufficient stock for {product_name}")


class ExternalServiceError(StorefrontError):
    status_code = 502
    default_message = "Payment provider unavailable"


class SignatureError(StorefrontError):
    """Payload webhooka nie przeszedl weryfikacji podpisu."""

    status_code = 400
    default_message = "Invalid signature"
