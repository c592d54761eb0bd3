"""
Authentication service handling registration, login and own-profile edits.
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from marketplace.models.user import User
from marketplace.schemas.user import UserCreate, UserLogin, UserUpdate
from marketplace.core.config import get_settings
from marketplace.core.context import RequestContext, ROLE_ADMIN, ROLE_VENDOR
from marketplace.core.security import hash_password, verify_password, create_access_token
from marketplace.core.logging import get_logger
from marketplace.services.vendor_service import create_default_vendor

logger = get_logger(__name__)
settings = get_settings()


def issue_token(user: User, expires_delta: timedelta) -> str:
    return create_access_token(data={"sub": str(user.id), "role": user.role}, expires_delta=expires_delta)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()))
    return result.scalar_one_or_none()


async def register_user(db: AsyncSession, user_data: UserCreate) -> tuple[User, str]:
    """
    Register a new user with hashed password.
    Vendor-role users get a pending Vendor profile with placeholder values.
    Raises 400 if the email already exists.
    """
    if user_data.role == ROLE_ADMIN and not settings.ALLOW_ADMIN_REGISTRATION:
        logger.warning("registration_failed", reason="admin_self_registration", email=user_data.email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered",
        )

    email = user_data.email.lower()
    if await get_user_by_email(db, email):
        logger.warning("registration_failed", reason="email_exists", email=email)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )

    user = User(
        name=user_data.name,
        email=email,
        hashed_password=hash_password(user_data.password),
        phone=user_data.phone,
        role=user_data.role,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )
    await db.refresh(user)

    if user.role == ROLE_VENDOR:
        await create_default_vendor(db, user)

    token = issue_token(user, timedelta(hours=settings.REGISTER_TOKEN_EXPIRE_HOURS))
    logger.info("user_registered", user_id=user.id, email=user.email, role=user.role)
    return user, token


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> tuple[User, str]:
    """
    Authenticate user and return a signed credential.
    Raises 401 if credentials are invalid.
    """
    user = await get_user_by_email(db, login_data.email)

    if not user or not verify_password(login_data.password, user.hashed_password):
        logger.warning("login_failed", email=login_data.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = issue_token(user, timedelta(days=settings.LOGIN_TOKEN_EXPIRE_DAYS))
    logger.info("user_logged_in", user_id=user.id)
    return user, token


async def get_current_user(db: AsyncSession, ctx: RequestContext) -> User:
    """Load the caller's user record. A valid token for a deleted user is a 401."""
    user = await db.get(User, ctx.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


async def update_profile(db: AsyncSession, ctx: RequestContext, data: UserUpdate) -> User:
    user = await db.get(User, ctx.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    if data.email:
        email = data.email.lower()
        if email != user.email:
            if await get_user_by_email(db, email):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already in use",
                )
            user.email = email

    if data.name:
        user.name = data.name.strip()
    if data.phone:
        user.phone = data.phone

    await db.flush()
    await db.refresh(user)
    logger.info("user_profile_updated", user_id=user.id)
    return user
