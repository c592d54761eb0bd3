"""
Category model: taxonomy entry shared by vendors and products.
"""

from sqlalchemy import Column, Integer, String, Boolean, Text

from marketplace.db.base import Base, TimestampMixin

DEFAULT_CATEGORY_ICON = "🎪"


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=False)
    icon = Column(String(16), nullable=False, default=DEFAULT_CATEGORY_ICON)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name}, active={self.is_active})>"
