# storefront/repos/cart_repo.py
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.exceptions import ConcurrentModification


@dataclass
class CartLine:
    product_id: int
    variant_id: int | None
    quantity: int
    unit_price: Decimal
    product_name: str | None = None
    variant_name: str | None = None
    sku: str | None = None

    @property
    def key(self):
        return (self.product_id, self.variant_id)

    @classmethod
    def from_item(cls, item: CartItemModel) -> "CartLine":
        return cls(
            product_id=item.product_id,
            variant_id=item.variant_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            product_name=item.product_name,
            variant_name=item.variant_name,
            sku=item.sku,
        )


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def find_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_or_create_for_user(self, user_id: int) -> CartModel:
        cart = self.find_by_user(user_id)
        if cart:
            return cart

        cart = CartModel(user_id=user_id, version=1)
        self.db.add(cart)
        self.db.flush()
        self.db.refresh(cart)
        return cart

    def save(self, cart: CartModel, lines: list[CartLine]) -> CartModel:
        """
        Replaces the cart's line collection with `lines`.

        Lines are matched on (product_id, variant_id): rows missing from `lines`
        are deleted, matching rows updated in place, new keys inserted. The cart
        version is then bumped with a compare-and-set on the version we loaded.
        Does not commit.
        """
        wanted: dict[tuple, CartLine] = {}
        for line in lines:
            if line.key in wanted:
                wanted[line.key].quantity += line.quantity
            else:
                wanted[line.key] = CartLine(**vars(line))

        existing = {item.line_key: item for item in cart.items}

        for key, item in existing.items():
            if key not in wanted:
                self.db.delete(item)

        for key, line in wanted.items():
            item = existing.get(key)
            if item is None:
                self.db.add(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=line.product_id,
                        variant_id=line.variant_id,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        product_name=line.product_name,
                        variant_name=line.variant_name,
                        sku=line.sku,
                    )
                )
            else:
                item.quantity = line.quantity
                item.unit_price = line.unit_price
                item.product_name = line.product_name
                item.variant_name = line.variant_name
                item.sku = line.sku

        self.db.flush()

        rowcount = self.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "version": cart.version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )

        # e.g. update carts set version 2 where id 1 and version 1
        if rowcount == 0:
            raise ConcurrentModification(f"Cart {cart.id} was modified by another operation")

        self.db.refresh(cart)
        return cart

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def replace_address(self, user_id: int, old_address_id: int, new_address_id: int | None) -> None:
        """
        Points the user's cart from one address to another (None unsets it),
        for shipping and billing alike. Bumps the version like any cart write.
        """
        for column in (CartModel.shipping_address_id, CartModel.billing_address_id):
            self.db.execute(
                update(CartModel)
                .where(CartModel.user_id == user_id, column == old_address_id)
                .values(
                    {
                        column.key: new_address_id,
                        "version": CartModel.version + 1,
                        "updated_at": datetime.now(timezone.utc),
                    }
                )
                .execution_options(synchronize_session="fetch")
            )

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
