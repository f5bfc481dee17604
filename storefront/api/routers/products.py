# storefront/api/routers/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Path, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_search_client
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, SearchUnavailableError, ValidationError
from storefront.domain.schemas import MessageOut, ProductCreate, ProductRead, ProductUpdate, SearchIn
from storefront.services.product_service import ImageUpload, ProductService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session = Depends(get_db), search_client=Depends(get_search_client)):
    return ProductService(db, search_client=search_client)


@router.get("/myproducts", response_model=List[ProductRead])
def my_products(
    user: UserModel = Depends(get_current_user),
    svc: ProductService = Depends(get_service),
):
    return svc.list_my_products(user.id)


@router.get("", response_model=List[ProductRead])
def list_products(svc: ProductService = Depends(get_service)):
    return svc.list_products()


@router.post("/search", response_model=List[ProductRead])
def search_products(payload: SearchIn, svc: ProductService = Depends(get_service)):
    try:
        return svc.search(payload.query, payload.limit)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SearchUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except RequestException as e:
        logger.error(f"Search backend error: {e}")
        raise HTTPException(status_code=502, detail="Failed to search products.")


def _form_payload(model, **fields):
    #form fields go through the same pydantic model as a JSON body, errors answer 400 {errors}
    try:
        return model.model_validate({k: v for k, v in fields.items() if v is not None})
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())


def _read_images(images: Optional[List[UploadFile]]) -> List[ImageUpload]:
    return [
        ImageUpload(image.filename or "upload", image.content_type or "", image.file.read())
        for image in images or []
    ]


@router.post("", response_model=ProductRead, status_code=201)
def create_product(
    title: str = Form(...),
    price: str = Form(...),
    stock: str = Form(...),
    description: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    user: UserModel = Depends(get_current_user),
    svc: ProductService = Depends(get_service),
):
    """
    Multipart form: title, description, price, stock and up to 10 `images` files.
    """
    payload = _form_payload(ProductCreate, title=title, description=description, price=price, stock=stock)
    try:
        return svc.create_product(user.id, payload, images=_read_images(images))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: int = Path(..., ge=1), svc: ProductService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{product_id}", response_model=ProductRead)
def update_product(
    product_id: int = Path(..., ge=1),
    title: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    stock: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    clear_images: bool = Form(False, alias="clearImages"),
    images: Optional[List[UploadFile]] = File(None),
    user: UserModel = Depends(get_current_user),
    svc: ProductService = Depends(get_service),
):
    """
    Multipart form, every field optional. New `images` replace the current ones,
    clearImages=true without files removes them.
    """
    payload = _form_payload(ProductUpdate, title=title, description=description, price=price, stock=stock)
    try:
        return svc.update_product(
            user.id,
            product_id,
            payload,
            images=_read_images(images),
            clear_images=clear_images,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int = Path(..., ge=1),
    user: UserModel = Depends(get_current_user),
    svc: ProductService = Depends(get_service),
):
    try:
        svc.delete_product(user.id, product_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return MessageOut(message="Product deleted successfully")
