import pytest

from storefront.domain.errors import ValidationError
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.services import product_service
from storefront.services.product_service import ImageUpload, ProductService

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture()
def service(db):
    #no search client: indexing is skipped
    return ProductService(db)


def _create(service, owner, images=()):
    payload = ProductCreate(title="Mechanical keyboard", description="Tactile", price="49.99", stock=10)
    return service.create_product(owner.id, payload, images=images)


class TestProductImages:
    def test_create_with_images(self, service, user):
        product = _create(service, user, [ImageUpload("a.png", "image/png", PNG)])

        assert [(i.content_type, i.image_data) for i in product.images] == [("image/png", PNG)]

    def test_oversized_image_rejected(self, service, user, monkeypatch):
        monkeypatch.setattr(product_service, "PRODUCT_IMAGE_MAX_BYTES", 16)

        with pytest.raises(ValidationError, match="larger than 16 bytes"):
            _create(service, user, [ImageUpload("big.png", "image/png", PNG)])

        assert service.list_products() == []

    def test_empty_image_rejected(self, service, user):
        with pytest.raises(ValidationError, match="is empty"):
            _create(service, user, [ImageUpload("blank.png", "image/png", b"")])

    def test_replace_and_clear(self, service, user):
        product = _create(service, user, [ImageUpload("a.png", "image/png", PNG)])

        replaced = service.update_product(
            user.id, product.id, ProductUpdate(), images=[ImageUpload("b.gif", "image/gif", b"GIF89a")]
        )
        assert [i.content_type for i in replaced.images] == ["image/gif"]

        cleared = service.update_product(user.id, product.id, ProductUpdate(), clear_images=True)
        assert cleared.images == []

    def test_non_owner_cannot_replace_images(self, service, user, other_user):
        product = _create(service, user, [ImageUpload("a.png", "image/png", PNG)])

        with pytest.raises(PermissionError):
            service.update_product(other_user.id, product.id, ProductUpdate(), clear_images=True)

        assert len(service.get_product(product.id).images) == 1


class TestProductUpdate:
    def test_empty_description_clears_it(self, service, user):
        product = _create(service, user)

        updated = service.update_product(user.id, product.id, ProductUpdate(description=""))

        assert updated.description is None

    def test_unset_fields_are_kept(self, service, user):
        product = _create(service, user)

        updated = service.update_product(user.id, product.id, ProductUpdate(stock=3))

        assert updated.stock == 3
        assert updated.title == "Mechanical keyboard"
        assert updated.description == "Tactile"
