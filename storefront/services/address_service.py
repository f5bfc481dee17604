# storefront/services/address_service.py
from typing import List

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.address import AddressModel
from storefront.domain.errors import NotFoundError, ValidationError
from storefront.domain.schemas import AddressIn
from storefront.repos.address_repo import AddressRepo
from storefront.repos.order_repo import OrderRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AddressRepo(db)
        self.orders = OrderRepo(db)

    def _owned_address(self, user_id: int, address_id: int) -> AddressModel:
        address = self.repo.get_user_address(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")
        return address

    def list_addresses(self, user_id: int) -> List[AddressModel]:
        return self.repo.get_user_addresses(user_id)

    def get_address(self, user_id: int, address_id: int) -> AddressModel:
        return self._owned_address(user_id, address_id)

    def create_address(self, user_id: int, payload: AddressIn) -> AddressModel:
        with transaction(self.db):
            address = self.repo.add_address(AddressModel(user_id=user_id, **payload.model_dump()))

        logger.info(f"Address {address.id} created for user {user_id}")
        return address

    def update_address(self, user_id: int, address_id: int, payload: AddressIn) -> AddressModel:
        with transaction(self.db):
            address = self._owned_address(user_id, address_id)
            for field, value in payload.model_dump().items():
                setattr(address, field, value)
            self.db.flush()

        logger.info(f"Address {address_id} updated")
        return address

    def delete_address(self, user_id: int, address_id: int) -> None:
        with transaction(self.db):
            address = self._owned_address(user_id, address_id)

            #orders keep pointing at their addresses, whatever their status
            if self.orders.count_orders_using_address(address_id) > 0:
                logger.warning(f"Address {address_id} is referenced by orders, delete rejected")
                raise ValidationError("Cannot delete address used in existing orders.")

            self.repo.delete_address(address)

        logger.info(f"Address {address_id} deleted")
