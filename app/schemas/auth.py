from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

from app.models.role import RoleName


# ─── Helpers ──────────────────────────────────────────────────────────────────
def validate_password_length(v: str) -> str:
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    return v


# ─── Request Schemas ──────────────────────────────────────────────────────────
class LoginRequest(BaseModel):
    email:    EmailStr
    password: str


class RegisterRequest(BaseModel):
    name:          str
    email:         EmailStr
    password:      str
    role:          RoleName = RoleName.OWNER
    phone:         Optional[str] = None
    address:       Optional[str] = None
    businessName:  Optional[str] = None
    businessType:  Optional[str] = None
    licenseNumber: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str) -> str:
        return validate_password_length(v)

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()
