from pydantic import BaseModel
from typing import TypeVar, Generic, Any

from app.config import settings
from app.utils.exceptions import ValidationException

T = TypeVar("T")

# Upper bound of the Integer primary key columns
MAX_ID = 2**31 - 1


# ─── Pagination Meta ───────────────────────────────────────────────────────────
class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int
    hasNext: bool
    hasPrev: bool


# ─── Error Detail (per field) ──────────────────────────────────────────────────
class ErrorDetail(BaseModel):
    field: str
    message: str


# ─── Standard Success Response ────────────────────────────────────────────────
class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


# ─── Error Response ───────────────────────────────────────────────────────────
class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    code: str
    errors: list[ErrorDetail] | None = None


# ─── Helper Functions ─────────────────────────────────────────────────────────
def success_response(message: str | None, data: Any = None) -> dict:
    """Return a standardized success dict (used in route handlers)."""
    body: dict = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def pagination_meta(total: int, page: int, limit: int) -> dict:
    total_pages = (total + limit - 1) // limit if limit > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page * limit < total,
        "hasPrev": page > 1,
    }


def paginated_response(
    message: str | None,
    key: str,
    items: list,
    total: int,
    page: int,
    limit: int,
) -> dict:
    """
    Return a standardized paginated dict.

    Items are nested under ``data[key]`` next to ``data["pagination"]``,
    e.g. ``{"data": {"cars": [...], "pagination": {...}}}``.
    """
    return success_response(message, {
        key: items,
        "pagination": pagination_meta(total, page, limit),
    })


# ─── Common Query Params ──────────────────────────────────────────────────────
class PaginationParams(BaseModel):
    page: int = 1
    limit: int = 12

    def clamp(self, max_limit: int | None = None) -> "PaginationParams":
        """Reject page/limit below 1; cap limit at max_limit."""
        if self.page < 1:
            raise ValidationException("Page must be a positive integer", field="page")
        if self.limit < 1:
            raise ValidationException("Limit must be a positive integer", field="limit")
        self.limit = min(self.limit, max_limit or settings.MAX_PAGE_LIMIT)
        return self
