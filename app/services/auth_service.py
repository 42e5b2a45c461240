import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import settings
from app.models.car import Car
from app.models.role import RoleName, SELF_SERVICE_ROLES
from app.models.user import User
from app.schemas.auth import LoginRequest, RegisterRequest
from app.utils.security import verify_password, hash_password, create_access_token
from app.utils.exceptions import (
    UnauthorizedException, ForbiddenException, DuplicateEntryException,
)

logger = logging.getLogger(__name__)


def serialize_user(u: User, car_count: int | None = None) -> dict:
    data = {
        "id":            u.id,
        "name":          u.name,
        "email":         u.email,
        "role":          u.role.value,
        "phone":         u.phone,
        "address":       u.address,
        "businessName":  u.businessName,
        "businessType":  u.businessType,
        "licenseNumber": u.licenseNumber,
        "isVerified":    u.isVerified,
        "createdAt":     u.createdAt.isoformat() if u.createdAt else None,
    }
    if car_count is not None:
        data["carCount"] = car_count
    return data


def issue_token(user: User) -> str:
    return create_access_token(user.id, user.email, user.role.value)


class AuthService:

    # ─── Register ─────────────────────────────────────────────────────────────
    def register(self, db: Session, data: RegisterRequest) -> dict:
        if data.role not in SELF_SERVICE_ROLES:
            raise ForbiddenException("Admin accounts cannot be self-registered")
        if db.query(User).filter(User.email == data.email).first():
            raise DuplicateEntryException("User already exists", field="email")

        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            role=data.role,
            phone=data.phone,
            address=data.address,
            businessName=data.businessName,
            businessType=data.businessType,
            licenseNumber=data.licenseNumber,
            # Private owners are trusted; shops and vendors await verification
            isVerified=data.role == RoleName.OWNER,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info(f"New {user.role.value} registered: {user.email}")

        return {"user": serialize_user(user), "token": issue_token(user), "tokenType": "Bearer"}

    # ─── Login ────────────────────────────────────────────────────────────────
    def login(self, db: Session, data: LoginRequest) -> dict:
        user = db.query(User).filter(User.email == data.email).first()

        if not user or not verify_password(data.password, user.password):
            raise UnauthorizedException("Invalid credentials")

        return {"user": serialize_user(user), "token": issue_token(user), "tokenType": "Bearer"}

    # ─── Profile ──────────────────────────────────────────────────────────────
    def profile(self, db: Session, user: User) -> dict:
        car_count = db.query(func.count(Car.id)).filter(Car.userId == user.id).scalar()
        return serialize_user(user, car_count=car_count or 0)

    # ─── Default admin ────────────────────────────────────────────────────────
    def ensure_default_admin(self, db: Session) -> User | None:
        """Create the configured admin account if it does not exist yet."""
        if not settings.DEFAULT_ADMIN_EMAIL or not settings.DEFAULT_ADMIN_PASSWORD:
            return None

        admin = db.query(User).filter(User.email == settings.DEFAULT_ADMIN_EMAIL).first()
        if admin:
            return admin

        admin = User(
            name=settings.DEFAULT_ADMIN_NAME,
            email=settings.DEFAULT_ADMIN_EMAIL,
            password=hash_password(settings.DEFAULT_ADMIN_PASSWORD),
            role=RoleName.ADMIN,
            isVerified=True,
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)
        logger.info(f"Default admin created: {admin.email}")
        return admin


auth_service = AuthService()
