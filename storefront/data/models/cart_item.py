from sqlalchemy import Column, Integer, ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    cart_id = Column(Integer, ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, nullable=False)
    variant_id = Column(Integer, nullable=True)

    quantity = Column(Integer, nullable=False)

    # price snapshot from when the line was last touched, informational only
    unit_price = Column(Numeric(12, 2), nullable=False)
    product_name = Column(String(255), nullable=True)
    variant_name = Column(String(255), nullable=True)
    sku = Column(String(64), nullable=True)

    cart = relationship("CartModel", back_populates="items")

    __table_args__ = (UniqueConstraint("cart_id", "product_id", "variant_id", name="u_cart_product_variant"),)

    @property
    def line_key(self):
        return (self.product_id, self.variant_id)
