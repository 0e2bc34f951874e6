from decimal import Decimal

from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    """
    Frozen pricing snapshot of a cart line, taken from the catalog when the
    order is placed. total_price is computed once and stored.
    """

    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)

    product_id = Column(Integer, nullable=False)
    variant_id = Column(Integer, nullable=True)
    quantity = Column(Integer, nullable=False)

    unit_price = Column(Numeric(12, 2), nullable=False)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    tax_amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    total_price = Column(Numeric(12, 2), nullable=False)

    product_name = Column(String(255), nullable=True)
    variant_name = Column(String(255), nullable=True)
    sku = Column(String(64), nullable=True)

    order = relationship("OrderModel", back_populates="items")
