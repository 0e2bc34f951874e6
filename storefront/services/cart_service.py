# storefront/services/cart_service.py
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.order import OrderModel
from storefront.domain.exceptions import (
    AddressNotFound,
    CartItemNotFound,
    CartNotFound,
    MissingCheckoutAddress,
    OrderNotFound,
    ProductValidationFailed,
)
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo, CartLine
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_service import OrderService
from storefront.services.product_validation import ProductPricingInfo, ProductValidationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Use cases of the cart domain, always scoped to the caller's user id.
    commands (add, update, remove, addresses, checkout) modify state
    query (get) only reads
    """

    def __init__(
        self,
        db: Session,
        product_validation: ProductValidationService,
        order_service: OrderService,
    ):
        self.repo = CartRepo(db)
        self.address_repo = AddressRepo(db)
        self.order_repo = OrderRepo(db)
        self.product_validation = product_validation
        self.order_service = order_service

    #query
    def get_cart(self, user_id: int) -> CartModel:
        cart = self.repo.find_by_user(user_id)
        if not cart:
            raise CartNotFound(user_id)
        return cart

    #commands
    def add_item(self, user_id: int, product_id: int, variant_id: int | None, quantity: int) -> CartModel:
        logger.info(
            f"Adding item to cart for user {user_id}: product={product_id}, "
            f"variant={variant_id}, quantity={quantity}"
        )
        _require_positive(quantity)

        pricing = self.product_validation.check_line(product_id, variant_id, quantity)

        #cart is created lazily on the first add
        cart = self.repo.get_or_create_for_user(user_id)
        lines = [CartLine.from_item(item) for item in cart.items]

        existing = next((line for line in lines if line.key == (product_id, variant_id)), None)
        if existing:
            new_quantity = existing.quantity + quantity
            logger.info(
                f"Product {product_id} already in cart {cart.id}, "
                f"quantity {existing.quantity} -> {new_quantity}"
            )
            if not pricing.covers(new_quantity):
                raise ProductValidationFailed(
                    f"Insufficient stock for requested quantity: {new_quantity}",
                    product_name=pricing.product_name,
                )
            existing.quantity = new_quantity
            _apply_pricing(existing, pricing)
        else:
            line = CartLine(product_id=product_id, variant_id=variant_id, quantity=quantity, unit_price=pricing.unit_price)
            _apply_pricing(line, pricing)
            lines.append(line)

        return self._save(cart, lines)

    def update_item_quantity(self, user_id: int, item_id: int, quantity: int) -> CartModel:
        logger.info(f"Updating item {item_id} quantity to {quantity} for user {user_id}")
        _require_positive(quantity)

        cart = self.get_cart(user_id)
        item = self._find_item(cart, item_id)

        pricing = self.product_validation.check_line(item.product_id, item.variant_id, quantity)

        lines = [CartLine.from_item(i) for i in cart.items]
        for line in lines:
            if line.key == item.line_key:
                line.quantity = quantity
                _apply_pricing(line, pricing)

        return self._save(cart, lines)

    def remove_item(self, user_id: int, item_id: int) -> CartModel:
        logger.info(f"Removing item {item_id} from cart for user {user_id}")

        cart = self.get_cart(user_id)
        item = self._find_item(cart, item_id)

        lines = [CartLine.from_item(i) for i in cart.items if i.id != item.id]
        return self._save(cart, lines)

    def set_shipping_address(self, user_id: int, address_id: int) -> CartModel:
        cart = self.get_cart(user_id)
        self._require_address(user_id, address_id)
        cart.shipping_address_id = address_id
        return self._save(cart, [CartLine.from_item(i) for i in cart.items])

    def set_billing_address(self, user_id: int, address_id: int) -> CartModel:
        cart = self.get_cart(user_id)
        self._require_address(user_id, address_id)
        cart.billing_address_id = address_id
        return self._save(cart, [CartLine.from_item(i) for i in cart.items])

    def checkout(self, user_id: int) -> OrderModel:
        cart = self.get_cart(user_id)

        if cart.shipping_address_id is None or cart.billing_address_id is None:
            raise MissingCheckoutAddress()

        logger.info(f"Checking out cart {cart.id} for user {user_id}")
        return self.order_service.create_order_from_cart(
            user_id, cart.shipping_address_id, cart.billing_address_id
        )

    def copy_items_from_order(self, user_id: int, order_id: int) -> CartModel:
        """
        "Buy again": puts the lines of one of the user's orders back into the
        cart at today's catalog prices. Products that are gone are skipped.
        """
        order = self.order_repo.find_by_id_and_user(order_id, user_id)
        if not order:
            raise OrderNotFound(order_id)

        cart = self.repo.get_or_create_for_user(user_id)
        lines = {line.key: line for line in (CartLine.from_item(i) for i in cart.items)}

        for order_line in order.items:
            key = (order_line.product_id, order_line.variant_id)
            quantity = order_line.quantity + (lines[key].quantity if key in lines else 0)
            try:
                pricing = self.product_validation.check_line(order_line.product_id, order_line.variant_id, quantity)
            except ProductValidationFailed as e:
                logger.warning(f"Skipping product {order_line.product_id} while copying order {order_id}: {e.message}")
                continue

            line = lines.get(key) or CartLine(
                product_id=order_line.product_id,
                variant_id=order_line.variant_id,
                quantity=0,
                unit_price=pricing.unit_price,
            )
            line.quantity = quantity
            _apply_pricing(line, pricing)
            lines[key] = line

        return self._save(cart, list(lines.values()))

    def _save(self, cart: CartModel, lines: list[CartLine]) -> CartModel:
        try:
            saved = self.repo.save(cart, lines)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Cart {cart.id} saved, version {saved.version}, {len(saved.items)} line(s)")
        return saved

    @staticmethod
    def _find_item(cart: CartModel, item_id: int):
        item = next((i for i in cart.items if i.id == item_id), None)
        if item is None:
            raise CartItemNotFound(item_id)
        return item

    def _require_address(self, user_id: int, address_id: int) -> None:
        if not self.address_repo.get_user_address(address_id, user_id):
            raise AddressNotFound(address_id)


def _require_positive(quantity: int) -> None:
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")


def _apply_pricing(line: CartLine, pricing: ProductPricingInfo) -> None:
    line.unit_price = pricing.unit_price
    line.product_name = pricing.product_name
    line.variant_name = pricing.variant_name
    line.sku = pricing.sku
