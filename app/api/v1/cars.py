from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional

from app.database import get_db
from app.dependencies import get_owner_or_above, get_car_owner_or_admin
from app.models.car import CarCondition
from app.models.user import User
from app.schemas.car import CarCreateForm, CarUpdateForm, CarFilters
from app.schemas.common import MAX_ID, PaginationParams, success_response, paginated_response
from app.services.car_service import car_service

router = APIRouter(prefix="/cars")


@router.get("", summary="List cars (paginated, filterable)")
def list_cars(
    page:      int                    = Query(1),
    limit:     int                    = Query(12),
    brand:     Optional[str]          = Query(None, description="Case-insensitive substring"),
    condition: Optional[CarCondition] = Query(None),
    minPrice:  Optional[float]        = Query(None, ge=0, allow_inf_nan=False),
    maxPrice:  Optional[float]        = Query(None, ge=0, allow_inf_nan=False),
    year:      Optional[int]          = Query(None, ge=1900),
    approved:  bool                   = Query(True, description="Public listing shows approved cars unless asked otherwise"),
    db:        Session                = Depends(get_db),
):
    p = PaginationParams(page=page, limit=limit).clamp()
    filters = CarFilters(brand=brand, condition=condition, minPrice=minPrice,
                         maxPrice=maxPrice, year=year, approved=approved)
    data, total = car_service.list_cars(db, filters, p.page, p.limit)
    return paginated_response(None, "cars", data, total, p.page, p.limit)


@router.get("/user/my-cars", summary="List the caller's own cars")
def my_cars(
    page:  int     = Query(1),
    limit: int     = Query(12),
    db:    Session = Depends(get_db),
    current_user: User = Depends(get_owner_or_above),
):
    p = PaginationParams(page=page, limit=limit).clamp()
    data, total = car_service.list_cars(db, CarFilters(userId=current_user.id), p.page, p.limit)
    return paginated_response(None, "cars", data, total, p.page, p.limit)


@router.get("/{car_id}", summary="Get car by ID")
def get_car(car_id: int = Path(..., ge=1, le=MAX_ID), db: Session = Depends(get_db)):
    return success_response(None, car_service.get_car(db, car_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a car listing")
def create_car(
    brand:       str                        = Form(...),
    model:       str                        = Form(...),
    year:        int                        = Form(...),
    condition:   CarCondition               = Form(...),
    price:       float                      = Form(...),
    description: str                        = Form(...),
    images:      Optional[List[UploadFile]] = File(None),
    db:          Session                    = Depends(get_db),
    current_user: User                      = Depends(get_owner_or_above),
):
    body = CarCreateForm(brand=brand, model=model, year=year, condition=condition,
                         price=price, description=description)
    data = car_service.create_car(db, body, images, current_user.id)
    return success_response("Car created successfully", data)


@router.put("/{car_id}", summary="Update a car listing (owner or admin)")
def update_car(
    car_id:      int                        = Path(..., ge=1, le=MAX_ID),
    brand:       Optional[str]              = Form(None),
    model:       Optional[str]              = Form(None),
    year:        Optional[int]              = Form(None),
    condition:   Optional[CarCondition]     = Form(None),
    price:       Optional[float]            = Form(None),
    description: Optional[str]              = Form(None),
    images:      Optional[List[UploadFile]] = File(None),
    db:          Session                    = Depends(get_db),
    _:           User                       = Depends(get_car_owner_or_admin),
):
    body = CarUpdateForm(brand=brand, model=model, year=year, condition=condition,
                         price=price, description=description)
    data = car_service.update_car(db, car_id, body, images)
    return success_response("Car updated successfully", data)


@router.delete("/{car_id}", summary="Delete a car listing (owner or admin)")
def delete_car(
    car_id: int     = Path(..., ge=1, le=MAX_ID),
    db:     Session = Depends(get_db),
    _:      User    = Depends(get_car_owner_or_admin),
):
    car_service.delete_car(db, car_id)
    return success_response("Car deleted successfully", None)
