"""
Unit tests for the access policy, independent of the HTTP layer.
"""

from dataclasses import FrozenInstanceError

import pytest

from marketplace.core.context import RequestContext
from marketplace.core.policy import AccessPolicy, Action


def policy_for(db_session, user) -> AccessPolicy:
    return AccessPolicy(db_session, RequestContext(user_id=user.id, role=user.role))


@pytest.mark.asyncio
async def test_own_vendor_is_memoized(db_session, vendor_user, vendor):
    policy = policy_for(db_session, vendor_user)
    first = await policy.own_vendor()
    assert first.id == vendor.id
    assert await policy.own_vendor() is first


@pytest.mark.asyncio
async def test_own_vendor_none_for_customer(db_session, customer):
    assert await policy_for(db_session, customer).own_vendor() is None


@pytest.mark.asyncio
async def test_manage_product(db_session, vendor_user, other_vendor_user, product, other_vendor):
    assert await policy_for(db_session, vendor_user).authorize(Action.MANAGE_PRODUCT, product)
    decision = await policy_for(db_session, other_vendor_user).authorize(Action.MANAGE_PRODUCT, product)
    assert not decision
    assert decision.reason == "Not authorized"


@pytest.mark.asyncio
async def test_booking_status_by_role(db_session, booking, customer, other_customer, vendor_user, admin):
    assert await policy_for(db_session, customer).authorize(Action.CHANGE_BOOKING_STATUS, booking, "cancelled")
    assert await policy_for(db_session, vendor_user).authorize(Action.CHANGE_BOOKING_STATUS, booking, "confirmed")
    assert await policy_for(db_session, admin).authorize(Action.CHANGE_BOOKING_STATUS, booking, "completed")
    assert not await policy_for(db_session, other_customer).authorize(Action.CHANGE_BOOKING_STATUS, booking, "cancelled")


@pytest.mark.asyncio
async def test_booking_status_role_targets_in_strict_mode(strict_transitions, db_session, booking, customer, vendor_user):
    decision = await policy_for(db_session, customer).authorize(Action.CHANGE_BOOKING_STATUS, booking, "confirmed")
    assert not decision
    assert decision.reason == "Customers can only cancel their bookings"

    assert not await policy_for(db_session, vendor_user).authorize(Action.CHANGE_BOOKING_STATUS, booking, "pending")
    assert await policy_for(db_session, vendor_user).authorize(Action.CHANGE_BOOKING_STATUS, booking, "completed")


@pytest.mark.asyncio
async def test_review_only_by_booking_customer(db_session, booking, customer, vendor_user):
    assert await policy_for(db_session, customer).authorize(Action.REVIEW_BOOKING, booking)
    assert not await policy_for(db_session, vendor_user).authorize(Action.REVIEW_BOOKING, booking)


@pytest.mark.asyncio
async def test_admin_action(db_session, admin, customer):
    assert await policy_for(db_session, admin).authorize(Action.ADMIN)
    assert not await policy_for(db_session, customer).authorize(Action.ADMIN)


def test_request_context_is_frozen():
    ctx = RequestContext(user_id=1, role="customer")
    with pytest.raises(FrozenInstanceError):
        ctx.role = "admin"


@pytest.mark.asyncio
async def test_unknown_role_gets_no_customer_rights(db_session, booking, customer):
    """A role the service never issues gets no customer rights."""
    stray = AccessPolicy(db_session, RequestContext(user_id=customer.id, role="user"))
    assert not stray.ctx.is_customer
    assert not await stray.authorize(Action.CHANGE_BOOKING_STATUS, booking, target_status="cancelled")
