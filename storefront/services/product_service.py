# storefront/services/product_service.py
from typing import List, NamedTuple, Sequence

from requests import RequestException
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.product import ProductModel
from storefront.data.models.product_image import ProductImageModel
from storefront.domain.errors import NotFoundError, SearchUnavailableError, ValidationError
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.services.search_client import SearchClient
from storefront.utils.settings import PRODUCT_IMAGE_MAX_BYTES
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SEARCH_MIN_RESULTS = 1
SEARCH_MAX_RESULTS = 50
PRODUCT_MAX_IMAGES = 10


class ImageUpload(NamedTuple):
    filename: str
    content_type: str
    data: bytes


class ProductService:
    """
    Catalog: product CRUD for vendors, public reads and search.
    The search index is a side copy, failing to update it never fails a catalog write.
    """

    def __init__(self, db: Session, search_client: SearchClient | None = None):
        self.db = db
        self.repo = ProductRepo(db)
        self.search_client = search_client

    def _search_enabled(self) -> bool:
        return self.search_client is not None and self.search_client.enabled

    def _index(self, product: ProductModel) -> None:
        if not self._search_enabled():
            return
        text = product.title if not product.description else f"{product.title}\n{product.description}"
        try:
            self.search_client.upsert_product(product.id, text)
        except RequestException as e:
            logger.warning(f"Could not index product {product.id}: {e}")

    def _unindex(self, product_id: int) -> None:
        if not self._search_enabled():
            return
        try:
            self.search_client.delete_product(product_id)
        except RequestException as e:
            logger.warning(f"Could not remove product {product_id} from index: {e}")

    def _image_rows(self, images: Sequence[ImageUpload]) -> List[ProductImageModel]:
        if len(images) > PRODUCT_MAX_IMAGES:
            raise ValidationError(f"A product can have at most {PRODUCT_MAX_IMAGES} images.")

        rows = []
        for image in images:
            if not (image.content_type or "").startswith("image/"):
                raise ValidationError(f"File {image.filename} is not an image.")
            if not image.data:
                raise ValidationError(f"Image {image.filename} is empty.")
            if len(image.data) > PRODUCT_IMAGE_MAX_BYTES:
                raise ValidationError(
                    f"Image {image.filename} is larger than {PRODUCT_IMAGE_MAX_BYTES} bytes."
                )
            rows.append(ProductImageModel(content_type=image.content_type, image_data=image.data))
        return rows

    # queries
    def list_products(self) -> List[ProductModel]:
        return self.repo.get_products()

    def list_my_products(self, owner_id: int) -> List[ProductModel]:
        return self.repo.get_products_by_owner(owner_id)

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError(f"Product with ID {product_id} not found.")
        return product

    def search(self, query: str, limit: int = 10) -> List[ProductModel]:
        query = query.strip()
        if not query:
            raise ValidationError("Search query is required and must be a non-empty string")

        if not self._search_enabled():
            raise SearchUnavailableError("Product search is not configured.")

        top_k = min(max(limit, SEARCH_MIN_RESULTS), SEARCH_MAX_RESULTS)
        product_ids = self.search_client.search(query, top_k)

        #keep index order, drop ids that no longer exist in the catalog
        products = []
        for product_id in product_ids:
            product = self.repo.get_product(product_id)
            if product:
                products.append(product)
        return products

    # commands
    def create_product(
        self,
        owner_id: int,
        payload: ProductCreate,
        images: Sequence[ImageUpload] = (),
    ) -> ProductModel:
        image_rows = self._image_rows(images)

        with transaction(self.db):
            product = self.repo.add_product(
                ProductModel(
                    owner_id=owner_id,
                    title=payload.title,
                    description=payload.description or None,
                    price=payload.price,
                    stock=payload.stock,
                    images=image_rows,
                )
            )

        logger.info(f"Product {product.id} created by user {owner_id} with {len(image_rows)} images")
        self._index(product)
        return product

    def update_product(
        self,
        owner_id: int,
        product_id: int,
        payload: ProductUpdate,
        images: Sequence[ImageUpload] = (),
        clear_images: bool = False,
    ) -> ProductModel:
        """
        Partial update. New images replace all current ones,
        clear_images without new images removes them; otherwise images stay as they are.
        """
        updates = payload.model_dump(exclude_unset=True)
        image_rows = self._image_rows(images)

        with transaction(self.db):
            product = self.get_product(product_id)
            if product.owner_id != owner_id:
                raise PermissionError("You do not have permission to modify this product.")

            for field, value in updates.items():
                if field == "description":
                    #empty description clears it
                    value = value or None
                elif value is None:
                    continue
                setattr(product, field, value)
            self.db.flush()

            if image_rows or clear_images:
                self.repo.replace_images(product, image_rows)

        logger.info(f"Product {product_id} updated: {sorted(updates)}, {len(image_rows)} new images")
        if "title" in updates or "description" in updates:
            self._index(product)
        return product

    def delete_product(self, owner_id: int, product_id: int) -> None:
        with transaction(self.db):
            product = self.get_product(product_id)
            if product.owner_id != owner_id:
                raise PermissionError("You do not have permission to delete this product.")
            self.repo.delete_product(product)

        logger.info(f"Product {product_id} deleted by user {owner_id}")
        self._unindex(product_id)
