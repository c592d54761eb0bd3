"""
Product model: a bookable service owned by exactly one vendor.

`category` holds the category *name* copied when the product is written.
It is a snapshot and does not follow later category renames.
"""

from sqlalchemy import Column, Integer, String, Float, Text, Boolean, JSON, ForeignKey, Index, CheckConstraint

from marketplace.db.base import Base, TimestampMixin


class Product(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String(100), nullable=False)
    images = Column(JSON, nullable=False, default=list)  # [{"url", "name", "size"}]
    features = Column(JSON, nullable=False, default=list)
    is_available = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_product_price_non_negative"),
        # Listing filters by category and price range
        Index("ix_products_category_price", "category", "price"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, vendor={self.vendor_id}, name={self.name}, price={self.price})>"
