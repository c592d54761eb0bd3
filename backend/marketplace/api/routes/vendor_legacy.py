"""
Legacy vendor endpoints under /vendor, kept for older clients.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    VendorResponse,
    VendorDeleteResponse,
)
from marketplace.services import vendor_service
from marketplace.core.policy import AccessPolicy, Action, get_access_policy

router = APIRouter(prefix="/vendor", tags=["Vendors (legacy)"])


@router.post("/add", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
async def add_vendor(
    data: VendorCreate,
    policy: AccessPolicy = Depends(get_access_policy),
):
    await policy.require(Action.CREATE_VENDOR)
    return await vendor_service.add_vendor(policy.db, policy.ctx.user_id, data)


@router.get("/all", response_model=list[VendorResponse])
async def list_all_vendors(db: AsyncSession = Depends(get_db)):
    return await vendor_service.list_vendors(db)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: int,
    data: VendorUpdate,
    policy: AccessPolicy = Depends(get_access_policy),
):
    vendor = await vendor_service.get_vendor(policy.db, vendor_id)
    await policy.require(Action.MANAGE_VENDOR, vendor)
    return await vendor_service.update_vendor(policy.db, vendor, data)


@router.delete("/{vendor_id}", response_model=VendorDeleteResponse)
async def delete_vendor(
    vendor_id: int,
    policy: AccessPolicy = Depends(get_access_policy),
):
    """Owner delete: removes the vendor, its products and their bookings. The user account stays."""
    vendor = await vendor_service.get_vendor(policy.db, vendor_id)
    await policy.require(Action.MANAGE_VENDOR, vendor)
    details = await vendor_service.purge_vendor(policy.db, vendor, delete_user=False)
    return VendorDeleteResponse(message="Vendor deleted successfully", details=details)
