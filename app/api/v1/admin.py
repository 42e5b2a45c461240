from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_admin_user
from app.models.role import RoleName
from app.models.user import User
from app.schemas.car import CarApprovalRequest, CarFilters
from app.schemas.common import MAX_ID, PaginationParams, success_response, paginated_response
from app.services.admin_service import admin_service
from app.services.car_service import car_service

router = APIRouter(prefix="/admin", dependencies=[Depends(get_admin_user)])


@router.get("/stats", summary="Dashboard statistics (Admin)")
def stats(db: Session = Depends(get_db)):
    return success_response(None, admin_service.stats(db))


@router.get("/users", summary="List users (Admin)")
def list_users(
    page:   int                = Query(1),
    limit:  int                = Query(20),
    search: Optional[str]      = Query(None, description="Name or email substring"),
    role:   Optional[RoleName] = Query(None),
    db:     Session            = Depends(get_db),
):
    p = PaginationParams(page=page, limit=limit).clamp()
    data, total = admin_service.list_users(db, p.page, p.limit, search, role)
    return paginated_response(None, "users", data, total, p.page, p.limit)


@router.get("/cars", summary="List all cars including pending (Admin)")
def list_cars(
    page:     int            = Query(1),
    limit:    int            = Query(20),
    approved: Optional[bool] = Query(None),
    brand:    Optional[str]  = Query(None),
    db:       Session        = Depends(get_db),
):
    p = PaginationParams(page=page, limit=limit).clamp()
    data, total = car_service.list_cars(db, CarFilters(approved=approved, brand=brand), p.page, p.limit)
    return paginated_response(None, "cars", data, total, p.page, p.limit)


@router.put("/cars/{car_id}/approve", summary="Approve or reject a listing (Admin)")
def approve_car(
    body: CarApprovalRequest,
    car_id: int = Path(..., ge=1, le=MAX_ID),
    db: Session = Depends(get_db),
):
    data = car_service.set_approval(db, car_id, body.approved)
    return success_response(f"Car {'approved' if body.approved else 'rejected'} successfully", data)


@router.delete("/users/{user_id}", summary="Delete a user (Admin, non-admin targets only)")
def delete_user(
    user_id: int     = Path(..., ge=1, le=MAX_ID),
    db:      Session = Depends(get_db),
    current_user: User = Depends(get_admin_user),
):
    admin_service.delete_user(db, user_id, current_user.id)
    return success_response("User deleted successfully", None)


@router.delete("/cars/{car_id}", summary="Delete any car (Admin)")
def delete_car(car_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    car_service.delete_car(db, car_id)
    return success_response("Car deleted successfully", None)
