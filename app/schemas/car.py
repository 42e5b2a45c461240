import math
from datetime import datetime
from pydantic import BaseModel, field_validator
from typing import Optional

from app.models.car import CarCondition


def _check_year(v: int | None) -> int | None:
    if v is None:
        return v
    max_year = datetime.now().year + 1
    if not (1900 <= v <= max_year):
        raise ValueError(f"Year must be between 1900 and {max_year}")
    return v


def _check_price(v: float | None) -> float | None:
    if v is None:
        return v
    if not math.isfinite(v):
        raise ValueError("Price must be a finite number")
    if v < 0:
        raise ValueError("Price cannot be negative")
    return v


# ─── Requests (multipart form bodies) ─────────────────────────────────────────
class CarCreateForm(BaseModel):
    model_config = {"allow_inf_nan": False}

    brand:       str
    model:       str
    year:        int
    condition:   CarCondition
    price:       float
    description: str

    @field_validator("brand", "model", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return _check_year(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return _check_price(v)


class CarUpdateForm(BaseModel):
    model_config = {"allow_inf_nan": False}

    brand:       Optional[str] = None
    model:       Optional[str] = None
    year:        Optional[int] = None
    condition:   Optional[CarCondition] = None
    price:       Optional[float] = None
    description: Optional[str] = None

    @field_validator("brand", "model", "description")
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip() if v is not None else v

    @field_validator("year")
    @classmethod
    def check_year(cls, v):
        return _check_year(v)

    @field_validator("price")
    @classmethod
    def check_price(cls, v):
        return _check_price(v)


class CarApprovalRequest(BaseModel):
    approved: bool


# ─── Query ────────────────────────────────────────────────────────────────────
class CarFilters(BaseModel):
    """Optional listing filters. Only the ones that are set constrain the query."""
    brand:     Optional[str] = None
    condition: Optional[CarCondition] = None
    minPrice:  Optional[float] = None
    maxPrice:  Optional[float] = None
    year:      Optional[int] = None
    approved:  Optional[bool] = None
    userId:    Optional[int] = None
