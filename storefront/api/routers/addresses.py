# storefront/api/routers/addresses.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import AddressIn, AddressOut
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


def get_service(db: Session = Depends(get_db)):
    return AddressService(db)


@router.post("", response_model=AddressOut, status_code=201)
def create_address(
    payload: AddressIn,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_service),
):
    return svc.create_address(user.id, payload)


@router.get("", response_model=List[AddressOut])
def list_addresses(
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_service),
):
    return svc.list_addresses(user.id)


@router.get("/{address_id}", response_model=AddressOut)
def get_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_service),
):
    try:
        return svc.get_address(user.id, address_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{address_id}", response_model=AddressOut)
def update_address(
    address_id: int,
    payload: AddressIn,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_service),
):
    try:
        return svc.update_address(user.id, address_id, payload)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{address_id}", status_code=204)
def delete_address(
    address_id: int,
    user: UserModel = Depends(get_current_user),
    svc: AddressService = Depends(get_service),
):
    try:
        svc.delete_address(user.id, address_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(status_code=204)
