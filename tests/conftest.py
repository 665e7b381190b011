import hashlib
import hmac
import json
import os
import tempfile
import time
from decimal import Decimal

# konfiguracja musi byc ustawiona zanim cokolwiek z storefront sie zaimportuje
_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["AUTH_SECRET"] = "test-auth-secret"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "1024"

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.api.deps import get_payment_gateway
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CartItemModel, CategoryModel, ProductModel, UserModel, UserRole
from storefront.domain.errors import ExternalServiceError
from storefront.main import create_app
from storefront.services.payment_gateway import PaymentGateway, PaymentSession
from storefront.utils.security import hash_password, sign_token

WEBHOOK_SECRET = "whsec_test_secret"

SHIPPING_ADDRESS = {
    "fullName": "Jane Doe",
    "addressLine1": "1 Market Street",
    "city": "Springfield",
    "state": "IL",
    "postalCode": "62701",
    "country": "US",
    "phone": "+1 555 0100",
}


class FakePaymentGateway(PaymentGateway):
    """Prawdziwa weryfikacja podpisow, sztuczne tworzenie sesji."""

    def __init__(self):
        super().__init__(api_key="sk_test_dummy", webhook_secret=WEBHOOK_SECRET)
        self.sessions = []
        self.fail = False

    def create_session(self, order, line_items):
        if self.fail:
            raise ExternalServiceError("Payment provider rejected the request")
        session = PaymentSession(
            session_id=f"cs_test_{order.id}",
            redirect_url=f"https://checkout.stripe.test/pay/cs_test_{order.id}",
        )
        self.sessions.append((order.id, line_items, session))
        return session


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    timestamp = timestamp if timestamp is not None else int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"), f"{timestamp}.{payload}".encode("utf-8"), hashlib.sha256
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


def session_event(
    event_type: str,
    order_id,
    event_id: str = "evt_test_1",
    session_id: str | None = None,
    reference: str | None = None,
) -> str:
    metadata = {"orderId": str(order_id)}
    if reference is not None:
        metadata["orderReference"] = reference
    return json.dumps(
        {
            "id": event_id,
            "type": event_type,
            "data": {"object": {"id": session_id or f"cs_test_{order_id}", "metadata": metadata}},
        }
    )


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def gateway():
    return FakePaymentGateway()


@pytest.fixture()
def client(gateway):
    app = create_app()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    return TestClient(app)


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(email: str | None = None, role: UserRole = UserRole.CUSTOMER, password: str = "password123"):
        counter["n"] += 1
        user = UserModel(
            email=email or f"user{counter['n']}@example.com",
            name=f"User {counter['n']}",
            password_hash=hash_password(password),
            role=role.value,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture()
def category(db):
    category = CategoryModel(name="Electronics", slug="electronics", description="Gadgets")
    db.add(category)
    db.commit()
    return category


@pytest.fixture()
def make_product(db, category):
    def _make(name: str, price: str = "10.00", stock: int = 10, featured: bool = False, description: str = ""):
        product = ProductModel(
            name=name,
            slug=name.lower().replace(" ", "-"),
            description=description or f"{name} description",
            price=Decimal(price),
            stock=stock,
            images=["https://img.example.com/1.jpg"],
            featured=featured,
            category_id=category.id,
        )
        db.add(product)
        db.commit()
        return product

    return _make


@pytest.fixture()
def put_in_cart(db):
    def _put(user, product, quantity: int):
        item = CartItemModel(user_id=user.id, product_id=product.id, quantity=quantity)
        db.add(item)
        db.commit()
        return item

    return _put


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {sign_token(user.id, user.role)}"}


def reload(db, model, pk):
    db.expire_all()
    return db.get(model, pk)
