"""
Vendor directory endpoints: public listing, vendor detail with products,
and self-service profile management for the calling vendor.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.schemas.product import ProductResponse
from marketplace.schemas.vendor import (
    VendorResponse,
    VendorWithProducts,
    VendorProfileUpdate,
    ProfileImageResponse,
)
from marketplace.services import vendor_service
from marketplace.services.storage_service import media_url
from marketplace.core.policy import AccessPolicy, Action, get_access_policy

router = APIRouter(prefix="/vendors", tags=["Vendors"])


@router.get("", response_model=list[VendorResponse])
async def list_vendors(db: AsyncSession = Depends(get_db)):
    return await vendor_service.list_vendors(db)


@router.get("/profile", response_model=VendorResponse)
async def get_own_profile(policy: AccessPolicy = Depends(get_access_policy)):
    return await policy.require_own_vendor()


@router.put("/profile", response_model=VendorResponse)
async def update_own_profile(
    data: VendorProfileUpdate,
    policy: AccessPolicy = Depends(get_access_policy),
):
    vendor = await policy.require_own_vendor()
    await policy.require(Action.MANAGE_VENDOR, vendor)
    return await vendor_service.update_own_profile(policy.db, vendor, data)


@router.put("/profile/image", response_model=ProfileImageResponse)
async def update_profile_image(
    profile_image: UploadFile = File(...),
    policy: AccessPolicy = Depends(get_access_policy),
):
    """Replace the vendor's profile image. The previous file is removed best-effort."""
    vendor = await policy.require_own_vendor()
    await policy.require(Action.MANAGE_VENDOR, vendor)
    vendor = await vendor_service.replace_profile_image(policy.db, vendor, profile_image)
    return ProfileImageResponse(
        message="Profile image updated successfully",
        profile_image=vendor.profile_image,
        image_url=media_url(vendor.profile_image),
    )


@router.get("/{vendor_id}", response_model=VendorWithProducts)
async def get_vendor(vendor_id: int, db: AsyncSession = Depends(get_db)):
    vendor, products = await vendor_service.get_vendor_with_products(db, vendor_id)
    return VendorWithProducts(
        **VendorResponse.model_validate(vendor).model_dump(exclude={"profile_image_url", "image_urls"}),
        products=[ProductResponse.model_validate(p) for p in products],
    )
