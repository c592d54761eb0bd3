from marketplace.schemas.user import UserCreate, UserLogin, UserUpdate, UserResponse, AuthResponse
from marketplace.schemas.product import ProductResponse, ProductListResponse
from marketplace.schemas.vendor import VendorCreate, VendorUpdate, VendorProfileUpdate, VendorResponse
from marketplace.schemas.booking import BookingCreate, BookingStatusUpdate, BookingReviewCreate, BookingResponse
from marketplace.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse

__all__ = [
    "UserCreate", "UserLogin", "UserUpdate", "UserResponse", "AuthResponse",
    "ProductResponse", "ProductListResponse",
    "VendorCreate", "VendorUpdate", "VendorProfileUpdate", "VendorResponse",
    "BookingCreate", "BookingStatusUpdate", "BookingReviewCreate", "BookingResponse",
    "CategoryCreate", "CategoryUpdate", "CategoryResponse",
]
