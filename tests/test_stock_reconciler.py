from decimal import Decimal

import pytest
from sqlalchemy import select, func

from conftest import reload
from storefront.data.models import CartItemModel, OrderItemModel, OrderModel, OrderStatus, ProductModel
from storefront.services.payment_gateway import PaymentEvent, PaymentEventKind
from storefront.services.stock_reconciler import StockReconciler


class RecordingNotifications:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id):
        self.sent.append((user_id, order_id))


@pytest.fixture()
def notifications():
    return RecordingNotifications()


@pytest.fixture()
def reconciler(db, notifications):
    return StockReconciler(db, notifications=notifications)


@pytest.fixture()
def pending_order(db, make_user, make_product, put_in_cart):
    user = make_user()
    a = make_product("Product A", price="20.00", stock=5)
    b = make_product("Product B", price="50.00", stock=1)
    put_in_cart(user, a, 2)
    put_in_cart(user, b, 1)

    order = OrderModel(
        user_id=user.id,
        status=OrderStatus.PENDING.value,
        total=Decimal("90.00"),
        shipping_address={"full_name": "Jane Doe"},
        items=[
            OrderItemModel(product_id=a.id, product_name=a.name, quantity=2, price=a.price),
            OrderItemModel(product_id=b.id, product_name=b.name, quantity=1, price=b.price),
        ],
    )
    db.add(order)
    db.commit()
    return order, user, a, b


def _event(kind, order_id, session_id=None, reference=None):
    return PaymentEvent(
        kind=kind,
        event_id="evt_1",
        event_type="test",
        order_id=str(order_id),
        session_id=session_id,
        order_reference=reference,
    )


def _cart_size(db, user_id):
    return db.execute(
        select(func.count(CartItemModel.id)).where(CartItemModel.user_id == user_id)
    ).scalar_one()


def test_completed_decrements_stock_and_clears_cart(db, reconciler, notifications, pending_order):
    order, user, a, b = pending_order

    assert reconciler.handle_event(_event(PaymentEventKind.SESSION_COMPLETED, order.id)) is True

    assert reload(db, OrderModel, order.id).status == OrderStatus.PROCESSING.value
    assert reload(db, ProductModel, a.id).stock == 3
    assert reload(db, ProductModel, b.id).stock == 0
    assert _cart_size(db, user.id) == 0
    assert notifications.sent == [(user.id, order.id)]


def test_redelivered_completion_is_a_noop(db, reconciler, notifications, pending_order):
    order, user, a, b = pending_order
    event = _event(PaymentEventKind.SESSION_COMPLETED, order.id)

    reconciler.handle_event(event)
    assert reconciler.handle_event(event) is False

    assert reload(db, OrderModel, order.id).status == OrderStatus.PROCESSING.value
    assert reload(db, ProductModel, a.id).stock == 3
    assert reload(db, ProductModel, b.id).stock == 0
    assert len(notifications.sent) == 1


def test_expired_cancels_without_touching_stock_or_cart(db, reconciler, pending_order):
    order, user, a, b = pending_order

    assert reconciler.handle_event(_event(PaymentEventKind.SESSION_EXPIRED, order.id)) is True

    assert reload(db, OrderModel, order.id).status == OrderStatus.CANCELLED.value
    assert reload(db, ProductModel, a.id).stock == 5
    assert _cart_size(db, user.id) == 2


def test_no_transition_out_of_terminal_states(db, reconciler, pending_order):
    order, user, a, b = pending_order
    reconciler.handle_event(_event(PaymentEventKind.SESSION_EXPIRED, order.id))

    # spozniony SessionCompleted po wygasnieciu nic nie zmienia
    assert reconciler.handle_event(_event(PaymentEventKind.SESSION_COMPLETED, order.id)) is False

    assert reload(db, OrderModel, order.id).status == OrderStatus.CANCELLED.value
    assert reload(db, ProductModel, a.id).stock == 5


def test_expiry_after_completion_keeps_processing(db, reconciler, pending_order):
    order, *_ = pending_order
    reconciler.handle_event(_event(PaymentEventKind.SESSION_COMPLETED, order.id))

    assert reconciler.handle_event(_event(PaymentEventKind.SESSION_EXPIRED, order.id)) is False
    assert reload(db, OrderModel, order.id).status == OrderStatus.PROCESSING.value


@pytest.mark.parametrize("order_id", ["424242", None, "not-a-number"])
def test_unknown_or_missing_order_is_ignored(reconciler, order_id):
    event = PaymentEvent(
        kind=PaymentEventKind.SESSION_COMPLETED, event_id="evt_x", event_type="test", order_id=order_id
    )

    assert reconciler.handle_event(event) is False


def test_other_event_kinds_change_nothing(db, reconciler, pending_order):
    order, *_ = pending_order
    event = PaymentEvent(
        kind=PaymentEventKind.OTHER, event_id="evt_2", event_type="payment_intent.created", order_id=str(order.id)
    )

    assert reconciler.handle_event(event) is False
    assert reload(db, OrderModel, order.id).status == OrderStatus.PENDING.value


def test_oversell_drives_stock_negative(db, reconciler, make_user, make_product):
    product = make_product("Last Unit", price="10.00", stock=1)
    orders = []
    for _ in range(2):
        order = OrderModel(
            user_id=make_user().id,
            status=OrderStatus.PENDING.value,
            total=Decimal("10.00"),
            shipping_address={},
            items=[OrderItemModel(product_id=product.id, product_name=product.name, quantity=1, price=product.price)],
        )
        db.add(order)
        db.commit()
        orders.append(order)

    for order in orders:
        reconciler.handle_event(_event(PaymentEventKind.SESSION_COMPLETED, order.id))

    assert reload(db, ProductModel, product.id).stock == -1


def test_deleted_product_is_skipped(db, reconciler, pending_order):
    order, user, a, b = pending_order
    db.execute(
        OrderItemModel.__table__.update().where(OrderItemModel.product_id == b.id).values(product_id=None)
    )
    db.commit()
    db.expire_all()

    assert reconciler.handle_event(_event(PaymentEventKind.SESSION_COMPLETED, order.id)) is True
    assert reload(db, ProductModel, a.id).stock == 3
    assert reload(db, ProductModel, b.id).stock == 1


def test_completion_for_another_session_is_ignored(db, reconciler, notifications, pending_order):
    order, user, a, b = pending_order
    order.payment_session_id = "cs_test_local"
    db.commit()

    event = _event(PaymentEventKind.SESSION_COMPLETED, order.id, session_id="cs_from_other_env")

    assert reconciler.handle_event(event) is False
    assert reload(db, OrderModel, order.id).status == OrderStatus.PENDING.value
    assert reload(db, ProductModel, a.id).stock == 5
    assert _cart_size(db, user.id) == 2
    assert notifications.sent == []


def test_expiry_for_another_session_is_ignored(db, reconciler, pending_order):
    order, *_ = pending_order
    order.payment_session_id = "cs_test_local"
    db.commit()

    event = _event(PaymentEventKind.SESSION_EXPIRED, order.id, session_id="cs_from_other_env")

    assert reconciler.handle_event(event) is False
    assert reload(db, OrderModel, order.id).status == OrderStatus.PENDING.value


def test_completion_with_other_reference_is_ignored(db, reconciler, pending_order):
    order, user, a, b = pending_order

    event = _event(PaymentEventKind.SESSION_COMPLETED, order.id, reference="0" * 32)

    assert reconciler.handle_event(event) is False
    assert reload(db, OrderModel, order.id).status == OrderStatus.PENDING.value
    assert reload(db, ProductModel, a.id).stock == 5


def test_completion_for_own_session_and_reference(db, reconciler, pending_order):
    order, user, a, b = pending_order
    order.payment_session_id = "cs_test_local"
    db.commit()

    event = _event(
        PaymentEventKind.SESSION_COMPLETED, order.id, session_id="cs_test_local", reference=order.reference
    )

    assert reconciler.handle_event(event) is True
    assert reload(db, OrderModel, order.id).status == OrderStatus.PROCESSING.value
    assert reload(db, ProductModel, a.id).stock == 3
    assert len(order.reference) == 32
