# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, computed_field
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus, PaymentMethod, PaymentStatus


class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr


class UserRead(BaseModel):
    """Schema for a user (response)."""

    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class AddressCreate(BaseModel):
    line1: str = Field(..., min_length=1, max_length=255)
    line2: str | None = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=2, max_length=2, description="ISO 3166-1 alpha-2 code")
    is_default: bool = False


class AddressOut(AddressCreate):
    id: int
    user_id: int

    model_config = ConfigDict(from_attributes=True)


class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product ID (> 0)")
    variant_id: int | None = Field(None, gt=0, description="Variant ID, omitted for the base product")
    quantity: int = Field(..., gt=0, description="Quantity (> 0)")


class QuantityIn(BaseModel):
    quantity: int = Field(..., gt=0, description="New quantity (> 0)")


class CartAddressIn(BaseModel):
    address_id: int = Field(..., gt=0)


class CartItemOut(BaseModel):
    """Schema for a cart line (response)."""

    id: int
    product_id: int
    variant_id: int | None = None
    quantity: int
    unit_price: Decimal
    product_name: str | None = None
    variant_name: str | None = None
    sku: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    """Schema for the cart (response). total uses cached line prices."""

    id: int
    user_id: int
    items: List[CartItemOut]
    shipping_address_id: int | None = None
    billing_address_id: int | None = None
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def total(self) -> Decimal:
        return sum((i.unit_price * i.quantity for i in self.items), Decimal("0.00"))


class OrderCreate(BaseModel):
    """Schema for creating an order from the caller's cart."""

    shipping_address_id: int = Field(..., gt=0)
    billing_address_id: int = Field(..., gt=0)


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    variant_id: int | None = None
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total_price: Decimal
    product_name: str | None = None
    variant_name: str | None = None
    sku: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: int
    user_id: int
    items: List[OrderItemOut]
    shipping_address_id: int
    billing_address_id: int
    order_status: OrderStatus
    payment_status: PaymentStatus
    total_amount: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderPage(BaseModel):
    items: List[OrderOut]
    total: int
    page: int
    size: int
    total_pages: int

    model_config = ConfigDict(from_attributes=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    payment_method: PaymentMethod
    amount: Decimal = Field(..., gt=0, decimal_places=2)
    idempotency_key: str | None = Field(None, min_length=1, max_length=64)


class PaymentOut(BaseModel):
    id: int
    order_id: int
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    amount: Decimal
    transaction_id: str
    gateway_reference: str | None = None
    failure_reason: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
