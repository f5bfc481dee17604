# storefront/repos/product_repo.py
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.product import ProductModel
from storefront.data.models.product_image import ProductImageModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_product_for_update(self, product_id: int) -> ProductModel | None:
        #row lock where the backend supports it (no-op on sqlite)
        return self.db.execute(
            select(ProductModel).where(ProductModel.id == product_id).with_for_update()
        ).scalar_one_or_none()

    def get_products(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .options(selectinload(ProductModel.images))
                .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            ).scalars()
        )

    def get_products_by_owner(self, owner_id: int) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(ProductModel.owner_id == owner_id)
                .options(selectinload(ProductModel.images))
                .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            ).scalars()
        )

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.flush()

    def replace_images(self, product: ProductModel, images: List[ProductImageModel]) -> None:
        #delete-orphan removes the previous rows on flush
        product.images = images
        self.db.flush()
