# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel
from typing import List
from decimal import Decimal
from datetime import datetime


class ApiModel(BaseModel):
    """Baza dla wszystkich schematow, JSON w camelCase, w pythonie snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


# auth

class _CredentialsIn(ApiModel):
    """Haslo idzie do hashowania dokladnie tak jak przyszlo, bez strip."""

    model_config = ConfigDict(str_strip_whitespace=False)

    @field_validator("email", "name", mode="before", check_fields=False)
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class SignupIn(_CredentialsIn):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Haslo (min. 8 znakow)")
    name: str = Field(..., min_length=2, max_length=100)


class LoginIn(_CredentialsIn):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(ApiModel):
    id: int
    email: str
    name: str
    role: str


class AuthOut(ApiModel):
    user: UserOut
    message: str


# katalog

class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    description: str | None = None
    image: str | None = None


class CategoryWithCountOut(CategoryOut):
    product_count: int = 0


class CategoryListOut(ApiModel):
    categories: List[CategoryWithCountOut]


class ProductCreate(ApiModel):
    """Schema dla tworzenia produktu (admin)."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    compare_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    images: List[str] = Field(..., min_length=1)
    stock: int = Field(..., ge=0)
    category_id: int = Field(..., gt=0)
    featured: bool = False


class ProductUpdate(ApiModel):
    """Czesciowa aktualizacja, tylko przeslane pola sa zmieniane."""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    compare_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    images: List[str] | None = Field(None, min_length=1)
    stock: int | None = Field(None, ge=0)
    category_id: int | None = Field(None, gt=0)
    featured: bool | None = None


class ProductOut(ApiModel):
    id: int
    name: str
    slug: str
    description: str
    price: Decimal
    compare_price: Decimal | None = None
    stock: int
    images: List[str]
    featured: bool
    category_id: int
    category: CategoryOut | None = None
    created_at: datetime


class ProductListOut(ApiModel):
    products: List[ProductOut]
    total: int
    limit: int
    offset: int


# koszyk

class CartItemIn(ApiModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(1, gt=0, description="Ilosc produktu (musi byc > 0)")


class CartItemUpdate(ApiModel):
    quantity: int = Field(..., gt=0, description="Nowa ilosc (musi byc > 0)")


class CartItemOut(ApiModel):
    id: int
    product_id: int
    quantity: int
    product: ProductOut


class CartOut(ApiModel):
    """Koszyk z cenami na zywo, total to tylko wycena."""

    items: List[CartItemOut]
    total: Decimal
    count: int


class MessageOut(ApiModel):
    message: str


# checkout i zamowienia

class ShippingAddress(ApiModel):
    full_name: str = Field(..., min_length=1)
    address_line1: str = Field(..., min_length=1)
    address_line2: str | None = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)


class CheckoutIn(ApiModel):
    shipping_address: ShippingAddress


class CheckoutOut(ApiModel):
    session_id: str
    session_url: str | None = None
    order_id: int


class OrderItemOut(ApiModel):
    id: int
    product_id: int | None = None
    product_name: str
    quantity: int
    price: Decimal


class OrderOut(ApiModel):
    id: int
    user_id: int
    status: str
    total: Decimal
    shipping_address: ShippingAddress
    payment_session_id: str | None = None
    created_at: datetime
    items: List[OrderItemOut]


class OrderListOut(ApiModel):
    orders: List[OrderOut]


class StatsOut(ApiModel):
    total_products: int
    total_orders: int
    total_users: int
    total_revenue: Decimal


class WebhookAck(ApiModel):
    received: bool = True
