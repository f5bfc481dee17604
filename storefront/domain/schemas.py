# storefront/domain/schemas.py
import base64
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from storefront.domain.order_status import OrderStatus
from storefront.utils.settings import CART_ITEM_MAX_QUANTITY

#decimals go out as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

#binary columns go out as base64 text
Base64Data = Annotated[
    bytes,
    PlainSerializer(lambda data: base64.b64encode(data).decode("ascii"), return_type=str, when_used="json"),
]

NO_HTML = r"^[^<>]+$"
NO_HTML_OR_EMPTY = r"^[^<>]*$"


class CamelModel(BaseModel):
    """Base for all API schemas: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class MessageOut(CamelModel):
    message: str


# users / auth

class UserCreate(CamelModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=200, pattern=NO_HTML)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128, pattern=NO_HTML)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Schema for a profile update, every field optional."""

    name: Optional[str] = Field(None, min_length=1, max_length=200, pattern=NO_HTML)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=128, pattern=NO_HTML)


class UserRead(CamelModel):
    """Public view of a user, never carries the password hash."""

    id: int
    name: str
    email: str
    created_at: datetime


class AuthOut(CamelModel):
    message: str
    token: str
    user: UserRead


class ProfileOut(CamelModel):
    message: str
    user: UserRead


# products

class ProductCreate(CamelModel):
    """Schema for creating a product."""

    title: str = Field(..., min_length=3, max_length=1000, pattern=NO_HTML)
    description: Optional[str] = Field(None, max_length=5000, pattern=NO_HTML_OR_EMPTY)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(..., ge=1, le=10000)


class ProductUpdate(CamelModel):
    """Schema for a partial product update."""

    title: Optional[str] = Field(None, min_length=3, max_length=1000, pattern=NO_HTML)
    description: Optional[str] = Field(None, max_length=5000, pattern=NO_HTML_OR_EMPTY)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=1, le=10000)


class ProductImageOut(CamelModel):
    id: int
    product_id: int
    content_type: str
    image_data: Base64Data
    created_at: datetime


class ProductRead(CamelModel):
    id: int
    owner_id: int
    title: str
    description: Optional[str] = None
    price: Money
    stock: int
    created_at: datetime
    images: List[ProductImageOut] = []


class SearchIn(CamelModel):
    query: str = Field(..., min_length=1, max_length=1000)
    limit: int = 10


# cart

class CartItemIn(CamelModel):
    """Schema for adding a product to the cart. quantity <= 0 removes an existing item."""

    product_id: int = Field(..., gt=0, description="Product ID (> 0)")
    quantity: int = Field(..., le=CART_ITEM_MAX_QUANTITY, description=f"Quantity (<= {CART_ITEM_MAX_QUANTITY})")


class CartItemQuantityIn(CamelModel):
    quantity: int = Field(..., le=CART_ITEM_MAX_QUANTITY)


class CartItemOut(CamelModel):
    id: int
    cart_id: int
    product_id: int
    quantity: int
    product: Optional[ProductRead] = None


class CartOut(CamelModel):
    """Cart with its items and the total at current catalog prices."""

    id: int
    user_id: int
    items: List[CartItemOut]
    total: Money


# addresses

class AddressIn(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=50)
    state: str = Field(..., min_length=1, max_length=50)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=10, max_length=10)


class AddressOut(AddressIn):
    id: int
    user_id: int


# orders

class OrderCreate(CamelModel):
    """Schema for creating an order. totalAmount is recomputed once items are added."""

    shipping_address_id: int = Field(..., gt=0)
    billing_address_id: int = Field(..., gt=0)
    total_amount: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)


class OrderItemIn(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1, le=10000)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class OrderStatusIn(CamelModel):
    status: OrderStatus


class OrderItemOut(CamelModel):
    id: int
    order_id: int
    product_id: Optional[int] = None
    quantity: int
    price: Money


class OrderOut(CamelModel):
    id: int
    user_id: int
    total_amount: Money
    status: OrderStatus
    shipping_address_id: int
    billing_address_id: int
    created_at: datetime
    items: List[OrderItemOut] = []


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class OrderPage(CamelModel):
    data: List[OrderOut]
    pagination: Pagination
