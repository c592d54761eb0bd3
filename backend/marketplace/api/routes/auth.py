"""
Authentication endpoints: register, login, validate and logout.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.db.session import get_db
from marketplace.schemas.user import UserCreate, UserLogin, UserResponse, AuthResponse, UserEnvelope, MessageResponse
from marketplace.services.auth_service import register_user, authenticate_user, get_current_user
from marketplace.core.config import get_settings
from marketplace.core.context import RequestContext
from marketplace.core.security import get_request_context

settings = get_settings()
router = APIRouter(tags=["Authentication"])


def _set_session_cookie(response: Response, token: str, max_age: int) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, response: Response, db: AsyncSession = Depends(get_db)):
    """Register a new account. Vendor-role accounts get a pending vendor profile."""
    user, token = await register_user(db, user_data)
    _set_session_cookie(response, token, settings.REGISTER_TOKEN_EXPIRE_HOURS * 3600)
    return AuthResponse(message="User registered successfully", token=token, user=UserResponse.model_validate(user))


@router.post("/login", response_model=AuthResponse)
async def login(login_data: UserLogin, response: Response, db: AsyncSession = Depends(get_db)):
    """Authenticate and receive the signed credential in the body and as a cookie."""
    user, token = await authenticate_user(db, login_data)
    _set_session_cookie(response, token, settings.LOGIN_TOKEN_EXPIRE_DAYS * 86400)
    return AuthResponse(message="Login successful", token=token, user=UserResponse.model_validate(user))


@router.get("/validate", response_model=UserEnvelope)
async def validate(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    user = await get_current_user(db, ctx)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, ctx: RequestContext = Depends(get_request_context)):
    response.delete_cookie(settings.COOKIE_NAME, httponly=True, samesite="lax", secure=settings.COOKIE_SECURE)
    return MessageResponse(message="Logged out successfully")
