"""
Access policy: one capability check for every mutating endpoint.

AUTHORIZATION MODEL
===================

Identity comes from the signed credential (see core.security). Every
handler then asks the same question through ``AccessPolicy.authorize``:
may this caller perform this action on this resource?

Ownership rules:
  - A vendor-role caller owns exactly the Vendor whose user_id is theirs.
    That lookup is done at most once per request and memoized here.
  - Products belong to their vendor; only the owning vendor manages them.
  - Booking status may be changed by the vendor behind the booking (either
    the booking's vendor_id or the vendor of the booked product), by the
    customer who made it, or by an admin.
  - Only the customer who made a booking may review it.

When STRICT_BOOKING_TRANSITIONS is on, roles are also limited in which
status they may set: customers may only cancel, vendors may confirm,
complete or cancel, admins may set anything the state machine allows.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.config import get_settings
from marketplace.core.context import RequestContext
from marketplace.core.logging import get_logger
from marketplace.core.security import get_request_context
from marketplace.db.session import get_db
from marketplace.models.booking import Booking
from marketplace.models.product import Product
from marketplace.models.vendor import Vendor

logger = get_logger(__name__)
settings = get_settings()

CUSTOMER_TARGET_STATUSES = frozenset({"cancelled"})
VENDOR_TARGET_STATUSES = frozenset({"confirmed", "completed", "cancelled"})

_UNRESOLVED = object()


class Action(str, Enum):
    ADMIN = "admin"
    CREATE_VENDOR = "create_vendor"
    MANAGE_VENDOR = "manage_vendor"
    MANAGE_PRODUCT = "manage_product"
    VIEW_VENDOR_BOOKINGS = "view_vendor_bookings"
    CHANGE_BOOKING_STATUS = "change_booking_status"
    REVIEW_BOOKING = "review_booking"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


class AccessPolicy:
    """Per-request policy bound to a caller and a DB session."""

    def __init__(self, db: AsyncSession, ctx: RequestContext):
        self.db = db
        self.ctx = ctx
        self._own_vendor: Any = _UNRESOLVED

    async def own_vendor(self) -> Optional[Vendor]:
        """The caller's Vendor record, or None. Queried once per request."""
        if self._own_vendor is _UNRESOLVED:
            result = await self.db.execute(select(Vendor).where(Vendor.user_id == self.ctx.user_id))
            self._own_vendor = result.scalar_one_or_none()
        return self._own_vendor

    async def require_own_vendor(self, detail: str = "Vendor profile not found") -> Vendor:
        vendor = await self.own_vendor()
        if vendor is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
        return vendor

    async def authorize(
        self,
        action: Action,
        resource: Any = None,
        target_status: Optional[str] = None,
    ) -> Decision:
        ctx = self.ctx

        if action is Action.ADMIN:
            return ALLOW if ctx.is_admin else deny("Access denied. Admin privileges required.")

        if action is Action.CREATE_VENDOR:
            return ALLOW if ctx.is_vendor else deny("Access denied")

        if action is Action.MANAGE_VENDOR:
            return ALLOW if resource.user_id == ctx.user_id else deny("Unauthorized")

        if action is Action.MANAGE_PRODUCT:
            vendor = await self.own_vendor()
            if vendor is not None and resource.vendor_id == vendor.id:
                return ALLOW
            return deny("Not authorized")

        if action is Action.VIEW_VENDOR_BOOKINGS:
            return ALLOW if ctx.is_vendor else deny("Access denied")

        if action is Action.CHANGE_BOOKING_STATUS:
            return await self._authorize_booking_status(resource, target_status)

        if action is Action.REVIEW_BOOKING:
            return ALLOW if resource.user_id == ctx.user_id else deny("Not authorized")

        return deny("Access denied")

    async def _authorize_booking_status(self, booking: Booking, target_status: Optional[str]) -> Decision:
        ctx = self.ctx
        strict = settings.STRICT_BOOKING_TRANSITIONS

        if ctx.is_vendor:
            vendor = await self.own_vendor()
            if vendor is None:
                return deny("Vendor profile not found")
            owns = booking.vendor_id == vendor.id
            if not owns and booking.product_id is not None:
                product = await self.db.get(Product, booking.product_id)
                owns = product is not None and product.vendor_id == vendor.id
            if not owns:
                return deny("Not authorized to update this booking")
            if strict and target_status not in VENDOR_TARGET_STATUSES:
                return deny(f"Vendors cannot set status '{target_status}'")
            return ALLOW

        if ctx.is_customer:
            if booking.user_id != ctx.user_id:
                return deny("Not authorized to update this booking")
            if strict and target_status not in CUSTOMER_TARGET_STATUSES:
                return deny("Customers can only cancel their bookings")
            return ALLOW

        if ctx.is_admin:
            return ALLOW

        return deny("Not authorized to update booking status")

    async def require(
        self,
        action: Action,
        resource: Any = None,
        target_status: Optional[str] = None,
    ) -> None:
        decision = await self.authorize(action, resource, target_status=target_status)
        if not decision:
            logger.warning(
                "access_denied",
                action=action.value,
                user_id=self.ctx.user_id,
                role=self.ctx.role,
                reason=decision.reason,
            )
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=decision.reason)


async def get_access_policy(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
) -> AccessPolicy:
    return AccessPolicy(db, ctx)


async def require_admin(policy: AccessPolicy = Depends(get_access_policy)) -> AccessPolicy:
    await policy.require(Action.ADMIN)
    return policy
