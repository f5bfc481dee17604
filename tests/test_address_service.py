import pytest

from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import AddressIn
from storefront.services.address_service import AddressService
from storefront.services.order_service import OrderService


def _payload(**overrides):
    data = {
        "full_name": "Jamie Doe",
        "street": "1 Main Street",
        "city": "Springfield",
        "state": "IL",
        "postal_code": "62701",
        "country": "US",
        "phone": "5550001111",
    }
    data.update(overrides)
    return AddressIn(**data)


@pytest.fixture()
def service(db):
    return AddressService(db)


class TestAddressService:
    def test_create_and_list(self, service, user):
        created = service.create_address(user.id, _payload())

        assert created.user_id == user.id
        assert [a.id for a in service.list_addresses(user.id)] == [created.id]

    def test_other_users_address_is_missing(self, service, user, other_user):
        created = service.create_address(user.id, _payload())

        with pytest.raises(NotFoundError):
            service.get_address(other_user.id, created.id)

    def test_update(self, service, user):
        created = service.create_address(user.id, _payload())

        updated = service.update_address(user.id, created.id, _payload(city="Shelbyville"))

        assert updated.city == "Shelbyville"

    def test_delete_unused(self, service, user):
        created = service.create_address(user.id, _payload())

        service.delete_address(user.id, created.id)

        assert service.list_addresses(user.id) == []

    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.CANCELLED])
    def test_delete_used_by_order_rejected(self, service, db, user, status):
        shipping = service.create_address(user.id, _payload())
        billing = service.create_address(user.id, _payload(city="Capital City"))
        orders = OrderService(db)
        order = orders.create_order(user.id, shipping.id, billing.id)
        if status == OrderStatus.CANCELLED:
            orders.cancel_order(user.id, order.id)

        for address in (shipping, billing):
            with pytest.raises(ValidationError, match="used in existing orders"):
                service.delete_address(user.id, address.id)

        assert len(service.list_addresses(user.id)) == 2
