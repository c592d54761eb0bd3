"""
Vendor model: the business profile of a vendor-role user.

Key design decisions:
- One vendor per user, enforced by a unique constraint on user_id
- Gallery images and embedded reviews are JSON lists, kept in the shape
  clients already consume
- `rating`/`reviews` are maintained independently of booking reviews
"""

from sqlalchemy import Column, Integer, String, Float, Text, JSON, ForeignKey, Index, CheckConstraint

from marketplace.db.base import Base, TimestampMixin

VENDOR_STATUSES = ("pending", "active", "suspended")
DEFAULT_VENDOR_CATEGORIES = ("Decoration", "Catering", "Lighting", "Event Hall")
DEFAULT_PROFILE_IMAGE = "Logo.jpg"


class Vendor(Base, TimestampMixin):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False, default=0)
    profile_image = Column(String(255), nullable=True)
    images = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="pending")

    owner_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    website = Column(String(255), nullable=True)

    rating = Column(Float, nullable=False, default=0)
    reviews = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'active', 'suspended')", name="check_vendor_status"),
        CheckConstraint("price >= 0", name="check_vendor_price_non_negative"),
        Index("ix_vendors_category_status", "category", "status"),
    )

    def __repr__(self) -> str:
        return f"<Vendor(id={self.id}, user={self.user_id}, name={self.name}, status={self.status})>"
