# storefront/services/product_validation.py
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import ProductValidationFailed
from storefront.services.product_client import ProductClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ACTIVE = "ACTIVE"


@dataclass(frozen=True)
class ProductPricingInfo:
    product_id: int
    variant_id: int | None
    product_name: str
    variant_name: str | None
    sku: str | None
    unit_price: Decimal
    available_stock: int
    inventory_tracking: bool
    # always True: inactive products raise ProductValidationFailed instead
    is_active: bool

    def covers(self, quantity: int) -> bool:
        if not self.inventory_tracking:
            return True
        return self.available_stock >= quantity


class ProductValidationService:
    """
    Catalog price/stock oracle.
    Reads product documents through ProductClient and turns them into
    ProductPricingInfo, or raises ProductValidationFailed.
    """

    def __init__(self, product_client: ProductClient):
        self.product_client = product_client

    def validate_and_get_pricing(self, product_id: int, variant_id: int | None = None) -> ProductPricingInfo:
        logger.info(f"Validating product {product_id} with variant {variant_id}")

        product = self.product_client.fetch_product(product_id)
        if not product:
            raise ProductValidationFailed(f"Product not found: {product_id}")

        name = product.get("name") or str(product_id)
        if product.get("status") != ACTIVE:
            raise ProductValidationFailed(f"Product is not active: {name}", product_name=name)

        if variant_id is None:
            return ProductPricingInfo(
                product_id=product_id,
                variant_id=None,
                product_name=name,
                variant_name=None,
                sku=product.get("sku"),
                unit_price=_price(product.get("base_price")),
                available_stock=int(product.get("stock") or 0),
                inventory_tracking=bool(product.get("inventory_tracking", True)),
                is_active=True,
            )

        variant = next(
            (v for v in product.get("variants") or [] if v.get("id") == variant_id),
            None,
        )
        if variant is None:
            raise ProductValidationFailed(f"Variant {variant_id} not found for product: {name}", product_name=name)

        return ProductPricingInfo(
            product_id=product_id,
            variant_id=variant_id,
            product_name=name,
            variant_name=variant.get("name"),
            sku=variant.get("sku"),
            unit_price=_price(variant.get("price")),
            available_stock=int(variant.get("stock") or 0),
            inventory_tracking=bool(product.get("inventory_tracking", True)),
            is_active=True,
        )

    def has_sufficient_stock(self, product_id: int, variant_id: int | None, quantity: int) -> bool:
        try:
            pricing = self.validate_and_get_pricing(product_id, variant_id)
        except ProductValidationFailed as e:
            logger.warning(f"Product validation failed during stock check: {e.message}")
            return False
        return pricing.covers(quantity)

    def check_line(self, product_id: int, variant_id: int | None, quantity: int) -> ProductPricingInfo:
        """Validate + stock check with a single catalog lookup."""
        pricing = self.validate_and_get_pricing(product_id, variant_id)
        if not pricing.covers(quantity):
            raise ProductValidationFailed(
                f"Insufficient stock for product: {pricing.product_name}",
                product_name=pricing.product_name,
            )
        return pricing


def _price(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(Decimal("0.01"))
