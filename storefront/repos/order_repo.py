# storefront/repos/order_repo.py
from decimal import Decimal

from sqlalchemy import select, update, func, or_
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel, OrderStatus


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        #order razem z items (cascade), zapis dopiero przy commit
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def list_orders(self, user_id: int | None = None) -> list[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.items))
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def transition_status(
        self,
        order_id: int,
        from_status: OrderStatus,
        to_status: OrderStatus,
        session_id: str | None = None,
    ) -> int:
        """
        Warunkowa zmiana statusu, jak optimistic locking na wersji:
        UPDATE orders SET status = :to
        WHERE id = :id AND status = :from
          AND (payment_session_id IS NULL OR payment_session_id = :session_id)
        rowcount 0 oznacza ze ktos juz to zrobil, zamowienia nie ma albo sesja jest obca.
        """
        session_match = OrderModel.payment_session_id.is_(None)
        if session_id is not None:
            session_match = or_(session_match, OrderModel.payment_session_id == session_id)

        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id, OrderModel.status == from_status.value, session_match)
            .values(status=to_status.value)
        )
        return result.rowcount

    def set_payment_session(self, order: OrderModel, session_id: str) -> OrderModel:
        order.payment_session_id = session_id
        self.db.flush()
        return order

    def count_orders(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def revenue(self) -> Decimal:
        total = self.db.execute(
            select(func.sum(OrderModel.total)).where(OrderModel.status == OrderStatus.PROCESSING.value)
        ).scalar_one()
        return Decimal(str(total)) if total is not None else Decimal("0.00")

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
