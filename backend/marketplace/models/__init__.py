from marketplace.models.user import User
from marketplace.models.vendor import Vendor
from marketplace.models.product import Product
from marketplace.models.booking import Booking
from marketplace.models.category import Category

__all__ = ["User", "Vendor", "Product", "Booking", "Category"]
