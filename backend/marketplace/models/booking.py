"""
Booking model: one customer's reservation of one product from one vendor.

Key design decisions:
- `amount` is snapshotted at creation and never re-derived from the product
- vendor_id is stored even though it is derivable from the product, because
  clients may book against an explicit vendor
- rating/review are optional and independent of the vendor's own reviews
- product_id is cleared when the product is deleted; the booking and its
  snapshotted amount stay
"""

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, Index, CheckConstraint

from marketplace.db.base import Base, TimestampMixin

BOOKING_STATUSES = ("pending", "confirmed", "completed", "cancelled")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)

    date = Column(DateTime(timezone=True), nullable=False)
    time = Column(String(50), nullable=False)
    event_type = Column(String(100), nullable=False, default="Other")
    guest_count = Column(Integer, nullable=False, default=1)
    special_requests = Column(Text, nullable=False, default="")
    amount = Column(Float, nullable=False)

    status = Column(String(20), nullable=False, default="pending")
    cancellation_reason = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    review = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("guest_count > 0", name="check_booking_guest_count_positive"),
        CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
        CheckConstraint("rating IS NULL OR (rating BETWEEN 1 AND 5)", name="check_booking_rating_range"),
        Index("ix_bookings_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, product={self.product_id}, status={self.status})>"
