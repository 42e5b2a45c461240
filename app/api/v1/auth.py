from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest
from app.schemas.common import SuccessResponse, success_response
from app.services.auth_service import auth_service

router = APIRouter(prefix="/auth")


# ─── POST /auth/register ──────────────────────────────────────────────────────
@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
    response_model=SuccessResponse,
)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user.
    - Email must be unique.
    - Role is OWNER (default), SHOP or VENDOR; admins are provisioned separately.
    - Password minimum 6 characters.
    """
    return success_response("User created successfully", auth_service.register(db, data))


# ─── POST /auth/login ─────────────────────────────────────────────────────────
@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    summary="Login and receive an access token",
    response_model=SuccessResponse,
)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    return success_response("Login successful", auth_service.login(db, data))


# ─── GET /auth/me ─────────────────────────────────────────────────────────────
@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    summary="Get current authenticated user profile",
    response_model=SuccessResponse,
)
def get_me(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return success_response("User profile retrieved", auth_service.profile(db, current_user))
