# storefront/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases for the cart domain.
    queries (get, find) only read, commands (add, update, remove, clear) run in one transaction each.
    Merge-on-add overwrites the quantity, it never sums.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    def _view(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)
        total = sum(
            (i.product.price * i.quantity for i in items if i.product is not None),
            Decimal("0.00"),
        )
        return {
            "id": cart.id,
            "user_id": cart.user_id,
            "items": items,
            "total": total,
        }

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart
        try:
            cart = self.repo.create_cart(CartModel(user_id=user_id))
        except IntegrityError:
            #a concurrent request created it first; this is the first write of the transaction
            self.db.rollback()
            cart = self.repo.get_cart_by_user(user_id)
            if cart is None:
                raise
            logger.info(f"Cart {cart.id} for user {user_id} was created concurrently, reusing it")
            return cart
        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    def _owned_item(self, cart_id: int, item_id: int) -> CartItemModel:
        item = self.repo.get_cart_item(item_id)
        if not item or item.cart_id != cart_id:
            raise NotFoundError("Cart item not found or does not belong to user.")
        return item

    #queries
    def find_cart(self, user_id: int) -> CartModel | None:
        return self.repo.get_cart_by_user(user_id)

    def require_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found.")
        return cart

    def get_cart(self, user_id: int) -> Dict[str, Any]:
        return self._view(self.require_cart(user_id))

    #commands
    def get_or_create_cart(self, user_id: int) -> Dict[str, Any]:
        #idempotent, the insert only happens on first access
        with transaction(self.db):
            cart = self._get_or_create(user_id)
        return self._view(cart)

    def _add_item(self, cart_id: int, product_id: int, quantity: int) -> CartItemModel | None:
        if not self.repo.get_cart(cart_id):
            raise NotFoundError("Cart not found.")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found.")

        if quantity > product.stock:
            logger.warning(
                f"Cart {cart_id}: rejected {quantity} x product {product_id}, stock {product.stock}"
            )
            raise ValidationError(
                f"Cannot add {quantity} items. Only {product.stock} are in stock."
            )

        existing_item = self.repo.get_cart_item_by_product(cart_id, product_id)

        if existing_item:
            if quantity <= 0:
                logger.info(f"Removing product {product_id} from cart {cart_id}")
                self.repo.delete_cart_item(existing_item)
                return None

            logger.info(
                f"Product {product_id} already in cart {cart_id}, quantity "
                f"{existing_item.quantity} -> {quantity}"
            )
            existing_item.quantity = quantity
            self.repo.flush()
            return existing_item

        if quantity <= 0:
            return None

        logger.info(f"Adding product {product_id} x{quantity} to cart {cart_id}")
        return self.repo.add_cart_item(
            CartItemModel(cart_id=cart_id, product_id=product_id, quantity=quantity)
        )

    def add_item(self, cart_id: int, product_id: int, quantity: int) -> CartItemModel | None:
        """
        Put a product in the cart with exactly `quantity` units.

        An existing line gets its quantity replaced, quantity <= 0 removes it.
        Returns the created/updated line or None when nothing is left in the cart.
        Stock is checked against the catalog now; it is not reserved.
        """
        with transaction(self.db):
            return self._add_item(cart_id, product_id, quantity)

    def add_item_for_user(self, user_id: int, product_id: int, quantity: int) -> CartItemModel | None:
        #cart creation and the add commit together
        with transaction(self.db):
            cart = self._get_or_create(user_id)
            return self._add_item(cart.id, product_id, quantity)

    def update_item_quantity(self, cart_id: int, item_id: int, quantity: int) -> CartItemModel | None:
        with transaction(self.db):
            item = self._owned_item(cart_id, item_id)

            product = self.products.get_product(item.product_id)
            if not product:
                raise NotFoundError(f"Associated product with ID {item.product_id} not found.")

            if quantity > product.stock:
                logger.warning(
                    f"Cart {cart_id}: rejected update of item {item_id} to {quantity}, stock {product.stock}"
                )
                raise ValidationError(
                    f"Cannot update to {quantity} items. Only {product.stock} are in stock."
                )

            if quantity <= 0:
                logger.info(f"Removing item {item_id} from cart {cart_id}")
                self.repo.delete_cart_item(item)
                return None

            item.quantity = quantity
            self.repo.flush()

        logger.info(f"Cart {cart_id}: item {item_id} quantity set to {quantity}")
        return item

    def remove_item(self, cart_id: int, item_id: int) -> None:
        with transaction(self.db):
            item = self._owned_item(cart_id, item_id)
            self.repo.delete_cart_item(item)

        logger.info(f"Removed item {item_id} from cart {cart_id}")

    def clear_cart(self, cart_id: int) -> int:
        with transaction(self.db):
            removed = self.repo.delete_cart_items(cart_id)

        logger.info(f"Cleared cart {cart_id}, {removed} items removed")
        return removed
