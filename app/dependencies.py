from fastapi import Depends, Path
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.car import Car
from app.models.role import RoleName
from app.models.user import User
from app.schemas.common import MAX_ID
from app.utils.security import verify_access_token
from app.utils.exceptions import (
    UnauthorizedException,
    ForbiddenException,
    NotFoundException,
)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


# ─── Get Current User ─────────────────────────────────────────────────────────
def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Validate JWT Bearer token and return the current User.
    Raises 401 if the token is missing, invalid, expired, or its user no longer exists.
    """
    if not credentials:
        raise UnauthorizedException("Access token required")

    payload = verify_access_token(credentials.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedException("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UnauthorizedException("Invalid token")

    return user


# ─── Role Guards ──────────────────────────────────────────────────────────────
def require_roles(*roles: RoleName):
    """
    Factory that returns a FastAPI dependency requiring one of the given roles.

    Usage:
        @router.get("/admin-only")
        def admin_route(current_user = Depends(require_roles(RoleName.ADMIN))):
            ...

        @router.get("/business")
        def route(current_user = Depends(require_roles(RoleName.SHOP, RoleName.VENDOR))):
            ...
    """
    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise ForbiddenException(
                f"This action requires one of these roles: {[r.value for r in roles]}"
            )
        return current_user
    return dependency


# ─── Pre-built role dependencies ─────────────────────────────────────────────
# Use these directly in route decorators for common role combinations

def get_admin_user(current_user: User = Depends(require_roles(RoleName.ADMIN))) -> User:
    return current_user

def get_shop_or_vendor(
    current_user: User = Depends(require_roles(RoleName.SHOP, RoleName.VENDOR, RoleName.ADMIN))
) -> User:
    return current_user

def get_owner_or_above(
    current_user: User = Depends(require_roles(*RoleName))
) -> User:
    """Any authenticated user holding a known role."""
    return current_user


# ─── Ownership Guard ──────────────────────────────────────────────────────────
def get_car_owner_or_admin(
    car_id: int = Path(..., ge=1, le=MAX_ID),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """
    Allow the request only if the caller owns car `car_id` or is an ADMIN.
    ADMIN skips the lookup; everyone else gets 404 for a missing car, 403 for someone else's.
    """
    if current_user.role == RoleName.ADMIN:
        return current_user

    owner_id = db.query(Car.userId).filter(Car.id == car_id).scalar()
    if owner_id is None:
        raise NotFoundException("Car")
    if owner_id != current_user.id:
        raise ForbiddenException("Access denied")
    return current_user
