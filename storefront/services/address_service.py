from contextlib import contextmanager

from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel
from storefront.domain.exceptions import AddressNotFound
from storefront.domain.schemas import AddressCreate
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AddressService:
    """
    User addresses. Deleting or editing never removes a row: orders keep
    referencing the address they were placed with, so the old row is
    soft deleted and the user's cart is moved off it in the same transaction.
    """

    def __init__(self, db: Session):
        self.repo = AddressRepo(db)
        self.cart_repo = CartRepo(db)

    @contextmanager
    def _transaction(self):
        try:
            yield
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

    def create_address(self, user_id: int, payload: AddressCreate) -> AddressModel:
        with self._transaction():
            if payload.is_default:
                self.repo.clear_default_flag(user_id)
            address = self.repo.add(AddressModel(user_id=user_id, **payload.model_dump()))

        logger.info(f"Address {address.id} added for user {user_id}")
        return address

    def update_address(self, user_id: int, address_id: int, payload: AddressCreate) -> AddressModel:
        logger.info(f"Updating address {address_id} for user {user_id}")

        existing = self.get_address(user_id, address_id)
        with self._transaction():
            self.repo.mark_deleted(existing)
            if payload.is_default:
                self.repo.clear_default_flag(user_id)
            address = self.repo.add(AddressModel(user_id=user_id, **payload.model_dump()))
            self.cart_repo.replace_address(user_id, address_id, address.id)

        logger.info(f"Address {address_id} replaced by {address.id}")
        return address

    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.list_user_addresses(user_id)

    def get_address(self, user_id: int, address_id: int) -> AddressModel:
        address = self.repo.get_user_address(address_id, user_id)
        if not address:
            raise AddressNotFound(address_id)
        return address

    def get_default_address(self, user_id: int) -> AddressModel | None:
        return self.repo.get_default_address(user_id)

    def set_default_address(self, user_id: int, address_id: int) -> AddressModel:
        address = self.get_address(user_id, address_id)
        with self._transaction():
            self.repo.clear_default_flag(user_id)
            address.is_default = True

        logger.info(f"Address {address_id} is now the default for user {user_id}")
        return address

    def require_owned(self, user_id: int, *address_ids: int) -> None:
        for address_id in address_ids:
            self.get_address(user_id, address_id)

    def delete_address(self, user_id: int, address_id: int) -> None:
        address = self.get_address(user_id, address_id)
        with self._transaction():
            self.repo.mark_deleted(address)
            self.cart_repo.replace_address(user_id, address_id, None)

        logger.info(f"Address {address_id} deleted for user {user_id}")
