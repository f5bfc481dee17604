# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, OrderStateError, ValidationError
from storefront.domain.schemas import OrderCreate, OrderItemIn, OrderOut, OrderPage, OrderStatusIn
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db)):
    return OrderService(db)


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    return svc.get_orders(user.id, page=page, limit=limit)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Creates an empty PENDING order for the caller's own addresses.
    """
    try:
        return svc.create_order(
            user.id,
            shipping_address_id=payload.shipping_address_id,
            billing_address_id=payload.billing_address_id,
            total_amount=payload.total_amount,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.get_order(user.id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: OrderStatusIn,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.update_status(user.id, order_id, payload.status)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OrderStateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{order_id}/items", response_model=OrderOut, status_code=201)
def add_order_item(
    order_id: int,
    payload: OrderItemIn,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    try:
        return svc.add_order_item(
            user.id,
            order_id,
            product_id=payload.product_id,
            quantity=payload.quantity,
            price=payload.price,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (OrderStateError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{order_id}", response_model=OrderOut)
def cancel_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    svc: OrderService = Depends(get_service),
):
    """
    Cancels a PENDING order without payment, the order stays with status CANCELLED.
    """
    try:
        return svc.cancel_order(user.id, order_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OrderStateError as e:
        raise HTTPException(status_code=400, detail=str(e))
