"""
User model: a registered identity with a single role.
"""

from sqlalchemy import Column, Integer, String, CheckConstraint

from marketplace.db.base import Base, TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # Stored lower-cased, which makes the unique index case-insensitive
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    role = Column(String(20), nullable=False, default="customer")

    __table_args__ = (
        CheckConstraint("role IN ('customer', 'vendor', 'admin')", name="check_user_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
