from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.address import AddressModel


class AddressRepo:
    """Only active (not soft deleted) addresses are visible through the finders."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, address: AddressModel) -> AddressModel:
        self.db.add(address)
        self.db.flush()
        self.db.refresh(address)
        return address

    def get_user_address(self, address_id: int, user_id: int) -> AddressModel | None:
        return self.db.execute(
            select(AddressModel).where(
                AddressModel.id == address_id,
                AddressModel.user_id == user_id,
                AddressModel.deleted_at.is_(None),
            )
        ).scalar_one_or_none()

    def list_user_addresses(self, user_id: int) -> list[AddressModel]:
        return list(
            self.db.execute(
                select(AddressModel)
                .where(AddressModel.user_id == user_id, AddressModel.deleted_at.is_(None))
                .order_by(AddressModel.is_default.desc(), AddressModel.id)
            ).scalars()
        )

    def get_default_address(self, user_id: int) -> AddressModel | None:
        return self.db.execute(
            select(AddressModel)
            .where(
                AddressModel.user_id == user_id,
                AddressModel.is_default.is_(True),
                AddressModel.deleted_at.is_(None),
            )
            .limit(1)
        ).scalar_one_or_none()

    def clear_default_flag(self, user_id: int) -> None:
        self.db.execute(
            update(AddressModel)
            .where(AddressModel.user_id == user_id, AddressModel.is_default.is_(True))
            .values(is_default=False)
            .execution_options(synchronize_session="fetch")
        )

    def mark_deleted(self, address: AddressModel) -> AddressModel:
        address.deleted_at = datetime.now(timezone.utc)
        address.is_default = False
        self.db.flush()
        return address

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
