#storefront/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import CartItemIn, CartItemOut, CartItemQuantityIn, CartOut, MessageOut
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session = Depends(get_db)):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    #first access creates the cart
    return svc.get_or_create_cart(user.id)


@router.post("/items", response_model=CartItemOut, status_code=201)
def add_item(
    payload: CartItemIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        item = svc.add_item_for_user(user.id, payload.product_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if item is None:
        return JSONResponse(status_code=200, content={"message": "Item removed from cart."})
    return item


@router.put("/items/{item_id}", response_model=CartItemOut)
def update_item(
    item_id: int,
    payload: CartItemQuantityIn,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        cart = svc.require_cart(user.id)
        item = svc.update_item_quantity(cart.id, item_id, payload.quantity)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if item is None:
        return JSONResponse(status_code=200, content={"message": "Item removed from cart."})
    return item


@router.delete("/items/{item_id}", response_model=MessageOut)
def remove_item(
    item_id: int,
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    try:
        cart = svc.require_cart(user.id)
        svc.remove_item(cart.id, item_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageOut(message="Item removed from cart successfully.")


@router.delete("", response_model=MessageOut)
def clear_cart(
    user: UserModel = Depends(get_current_user),
    svc: CartService = Depends(get_service),
):
    #no cart means it is already empty
    cart = svc.find_cart(user.id)
    if cart:
        svc.clear_cart(cart.id)
    return MessageOut(message="Cart cleared successfully.")
