# storefront/repos/order_repo.py
from decimal import Decimal
from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.payment import PaymentModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(
                OrderModel.id == order_id,
                OrderModel.user_id == user_id,
            )
        ).scalar_one_or_none()

    def get_user_orders(self, user_id: int, offset: int, limit: int) -> List[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel)
                .where(OrderModel.user_id == user_id)
                .options(selectinload(OrderModel.items))
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars()
        )

    def count_user_orders(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        ).scalar_one()

    def get_order_items(self, order_id: int) -> List[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars()
        )

    def get_order_item_by_product(self, order_id: int, product_id: int) -> OrderItemModel | None:
        return self.db.execute(
            select(OrderItemModel).where(
                OrderItemModel.order_id == order_id,
                OrderItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def compute_total(self, order_id: int) -> Decimal:
        items = self.get_order_items(order_id)
        return sum((i.price * i.quantity for i in items), Decimal("0.00"))

    def has_payment(self, order_id: int) -> bool:
        count = self.db.execute(
            select(func.count(PaymentModel.id)).where(PaymentModel.order_id == order_id)
        ).scalar_one()
        return count > 0

    def count_orders_using_address(self, address_id: int) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(
                or_(
                    OrderModel.shipping_address_id == address_id,
                    OrderModel.billing_address_id == address_id,
                )
            )
        ).scalar_one()

    def flush(self) -> None:
        self.db.flush()
