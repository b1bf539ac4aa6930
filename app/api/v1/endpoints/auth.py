"""Authentication endpoints: registration, login, profile and password management."""

import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_user
from app.models.user import User, UserRole
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    Token,
    UserOut,
    ProfileUpdate,
    ChangePassword,
    ForgotPassword,
    ResetPassword,
)
from app.schemas.common import ApiResponse
from app.services.auth import (
    hash_password,
    verify_password,
    authenticate_user,
    create_user_token,
    get_user_by_email,
    generate_reset_token,
    get_user_by_reset_token,
)
from app.services.email_service import email_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=ApiResponse[Token], status_code=201)
async def register(user_data: UserRegister, db: AsyncSession = Depends(get_db)):
    """Register a new patient account and log them in."""
    if await get_user_by_email(db, user_data.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    if user_data.phone:
        result = await db.execute(select(User.id).where(User.phone == user_data.phone))
        if result.first():
            raise HTTPException(status_code=409, detail="Phone number already registered")

    user = User(
        email=user_data.email,
        hashed_password=hash_password(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        date_of_birth=user_data.date_of_birth,
        gender=user_data.gender,
        role=UserRole.PATIENT,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    try:
        await email_service.send_welcome_email(user.email, user.first_name)
    except Exception as e:
        logger.error("Failed to send welcome email to %s: %s", user.email, e)

    logger.info("Patient registered: %s", user.email)
    token = Token(access_token=create_user_token(user), user=UserOut.model_validate(user))
    return ApiResponse(message="Registration successful", data=token)


@router.post("/login", response_model=ApiResponse[Token])
async def login(credentials: UserLogin, db: AsyncSession = Depends(get_db)):
    """Login with email and password. Returns 403 if the account is disabled."""
    user = await authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(status_code=401, detail="Incorrect email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="User account is disabled")

    user.last_login_at = datetime.utcnow()
    await db.commit()
    await db.refresh(user)

    logger.info("User logged in: %s (role: %s)", user.email, user.role.value)
    token = Token(access_token=create_user_token(user), user=UserOut.model_validate(user))
    return ApiResponse(message="Login successful", data=token)


@router.get("/me", response_model=ApiResponse[UserOut])
async def me(current_user: User = Depends(get_current_user)):
    return ApiResponse(data=UserOut.model_validate(current_user))


@router.put("/me", response_model=ApiResponse[UserOut])
async def update_me(
    update_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update the caller's own profile. 409 if the new phone belongs to someone else."""
    changes = update_data.model_dump(exclude_unset=True)
    if changes.get("phone") and changes["phone"] != current_user.phone:
        result = await db.execute(
            select(User.id).where(User.phone == changes["phone"], User.id != current_user.id)
        )
        if result.first():
            raise HTTPException(status_code=409, detail="Phone number already registered")

    for key, value in changes.items():
        setattr(current_user, key, value)
    await db.commit()
    await db.refresh(current_user)

    return ApiResponse(message="Resource updated successfully", data=UserOut.model_validate(current_user))


@router.put("/change-password", response_model=ApiResponse[None])
async def change_password(
    data: ChangePassword,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not verify_password(data.current_password, current_user.hashed_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    current_user.hashed_password = hash_password(data.new_password)
    current_user.reset_token = None
    current_user.reset_expires = None
    await db.commit()

    logger.info("Password changed for user: %s", current_user.email)
    return ApiResponse(message="Password changed successfully")


@router.post("/forgot-password", response_model=ApiResponse[None])
async def forgot_password(data: ForgotPassword, db: AsyncSession = Depends(get_db)):
    """Email a reset link. The response is the same whether or not the email is registered."""
    message = "If the email exists, a password reset link has been sent"
    user = await get_user_by_email(db, data.email)
    if not user or not user.is_active:
        logger.warning("Password reset requested for unknown or disabled email: %s", data.email)
        return ApiResponse(message=message)

    user.reset_token, user.reset_expires = generate_reset_token()
    await db.commit()

    reset_link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={user.reset_token}"
    try:
        await email_service.send_password_reset_email(user.email, user.first_name, reset_link)
    except Exception as e:
        logger.error("Failed to send password reset email to %s: %s", user.email, e)

    return ApiResponse(message=message)


@router.post("/reset-password", response_model=ApiResponse[None])
async def reset_password(data: ResetPassword, db: AsyncSession = Depends(get_db)):
    """Set a new password with a token from the reset email. Each token works once."""
    user = await get_user_by_reset_token(db, data.token)
    if not user:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")

    user.hashed_password = hash_password(data.new_password)
    user.reset_token = None
    user.reset_expires = None
    await db.commit()

    logger.info("Password reset for user: %s", user.email)
    return ApiResponse(message="Password reset successful")
