# storefront/services/order_service.py
import math
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import NotFoundError, OrderStateError, ValidationError
from storefront.domain.order_status import OrderStatus, can_transition
from storefront.repos.address_repo import AddressRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PAID_CANCEL_ERROR = "Cannot cancel an order with an existing payment, request a refund instead."

#largest value orders.total_amount (Numeric(10, 2)) holds
ORDER_TOTAL_MAX = Decimal("99999999.99")


class OrderService:
    """
    Order domain, separate from CartService.

    Every order is scoped to its owner: someone else's order reads as missing.
    Stock is taken when an item is added and given back when the order is cancelled.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)
        self.addresses = AddressRepo(db)
        self.products = ProductRepo(db)

    def _owned_order(self, user_id: int, order_id: int) -> OrderModel:
        order = self.repo.get_user_order(order_id, user_id)
        if not order:
            raise NotFoundError("Order not found.")
        return order

    def _restock(self, order: OrderModel) -> None:
        for item in self.repo.get_order_items(order.id):
            if item.product_id is None:
                continue
            product = self.products.get_product_for_update(item.product_id)
            if product:
                product.stock += item.quantity
        self.repo.flush()

    def create_order(
        self,
        user_id: int,
        shipping_address_id: int,
        billing_address_id: int,
        total_amount: Decimal = Decimal("0.00"),
    ) -> OrderModel:
        """
        Use Case: create an empty PENDING order.

        1. Both addresses must belong to the user
        2. Insert the order
        """
        with transaction(self.db):
            if not self.addresses.get_user_address(shipping_address_id, user_id):
                raise ValidationError("Shipping address not found or does not belong to user.")
            if not self.addresses.get_user_address(billing_address_id, user_id):
                raise ValidationError("Billing address not found or does not belong to user.")

            order = self.repo.create_order(
                OrderModel(
                    user_id=user_id,
                    total_amount=total_amount,
                    status=OrderStatus.PENDING.value,
                    shipping_address_id=shipping_address_id,
                    billing_address_id=billing_address_id,
                )
            )

        logger.info(f"Order {order.id} created for user {user_id}")
        return order

    def get_order(self, user_id: int, order_id: int) -> OrderModel:
        return self._owned_order(user_id, order_id)

    def get_orders(self, user_id: int, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """
        Use Case: one page of the user's orders, newest first.
        """
        if page < 1 or limit < 1:
            raise ValidationError("page and limit must be positive integers.")

        total = self.repo.count_user_orders(user_id)
        orders = self.repo.get_user_orders(user_id, offset=(page - 1) * limit, limit=limit)

        return {
            "data": orders,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": math.ceil(total / limit),
            },
        }

    def add_order_item(
        self,
        user_id: int,
        order_id: int,
        product_id: int,
        quantity: int,
        price: Decimal,
    ) -> OrderModel:
        """
        Use Case: add a line to a PENDING order.

        Same product twice sums the quantities and keeps the latest price.
        Stock is decremented and totalAmount recomputed in the same transaction.
        """
        with transaction(self.db):
            order = self._owned_order(user_id, order_id)

            if order.status != OrderStatus.PENDING.value:
                logger.warning(f"Order {order_id}: add item rejected in status {order.status}")
                raise OrderStateError("Cannot add items to an order that is already being processed.")

            product = self.products.get_product_for_update(product_id)
            if not product:
                raise NotFoundError(f"Product with ID {product_id} not found.")

            if quantity > product.stock:
                logger.warning(
                    f"Order {order_id}: rejected {quantity} x product {product_id}, stock {product.stock}"
                )
                raise ValidationError(
                    f"Insufficient stock for product {product_id}. "
                    f"Requested {quantity}, available {product.stock}."
                )

            existing_item = self.repo.get_order_item_by_product(order_id, product_id)
            if existing_item:
                logger.info(
                    f"Product {product_id} already in order {order_id}, quantity "
                    f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
                )
                existing_item.quantity += quantity
                existing_item.price = price
            else:
                self.repo.add_order_item(
                    OrderItemModel(
                        order_id=order_id,
                        product_id=product_id,
                        quantity=quantity,
                        price=price,
                    )
                )

            product.stock -= quantity
            self.repo.flush()

            total = self.repo.compute_total(order_id)
            if total > ORDER_TOTAL_MAX:
                logger.warning(f"Order {order_id}: rejected item, total {total} over {ORDER_TOTAL_MAX}")
                raise ValidationError(f"Order total cannot exceed {ORDER_TOTAL_MAX}.")

            order.total_amount = total
            self.repo.flush()

        #items collection is reloaded on next access
        self.db.expire(order, ["items"])
        logger.info(f"Order {order_id}: product {product_id} x{quantity}, total {order.total_amount}")
        return order

    def update_status(self, user_id: int, order_id: int, new_status: OrderStatus) -> OrderModel:
        new_status = OrderStatus(new_status)

        with transaction(self.db):
            order = self._owned_order(user_id, order_id)
            current = OrderStatus(order.status)

            if not can_transition(current, new_status):
                logger.warning(f"Order {order_id}: rejected transition {current.value} -> {new_status.value}")
                raise OrderStateError(
                    f"Invalid status transition from {current.value} to {new_status.value}."
                )

            if new_status == OrderStatus.CANCELLED:
                if self.repo.has_payment(order.id):
                    logger.warning(f"Order {order_id}: cancel rejected, payment exists")
                    raise OrderStateError(PAID_CANCEL_ERROR)
                self._restock(order)

            order.status = new_status.value
            self.repo.flush()

        logger.info(f"Order {order_id} status {current.value} -> {new_status.value}")
        return order

    def cancel_order(self, user_id: int, order_id: int) -> OrderModel:
        """
        Use Case: customer cancels a PENDING order with no payment.
        The row is kept with status CANCELLED.
        """
        with transaction(self.db):
            order = self._owned_order(user_id, order_id)

            if order.status != OrderStatus.PENDING.value:
                raise OrderStateError("Only pending orders can be cancelled.")

            if self.repo.has_payment(order.id):
                logger.warning(f"Order {order_id}: cancel rejected, payment exists")
                raise OrderStateError(PAID_CANCEL_ERROR)

            self._restock(order)
            order.status = OrderStatus.CANCELLED.value
            self.repo.flush()

        logger.info(f"Order {order_id} cancelled by user {user_id}")
        return order
