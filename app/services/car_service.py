import logging

from fastapi import UploadFile
from sqlalchemy.orm import Session, Query, joinedload, selectinload

from app.models.car import Car
from app.models.gallery import GalleryImage
from app.models.user import User
from app.schemas.car import CarCreateForm, CarUpdateForm, CarFilters
from app.utils.exceptions import NotFoundException, ValidationException
from app.utils.uploads import read_images, store_images, discard_images

logger = logging.getLogger(__name__)


def _owner(u: User, detail: bool = False) -> dict:
    data = {"id": u.id, "name": u.name, "email": u.email}
    if detail:
        data.update({
            "role":         u.role.value,
            "phone":        u.phone,
            "address":      u.address,
            "businessName": u.businessName,
            "businessType": u.businessType,
        })
    return data


def serialize_car(c: Car, detail: bool = False) -> dict:
    data = {
        "id":           c.id,
        "brand":        c.brand,
        "model":        c.model,
        "year":         c.year,
        "condition":    c.condition.value,
        "price":        c.price,
        "description":  c.description,
        "images":       list(c.images or []),
        "approved":     c.approved,
        "userId":       c.userId,
        "createdAt":    c.createdAt.isoformat() if c.createdAt else None,
        "updatedAt":    c.updatedAt.isoformat() if c.updatedAt else None,
        "user":         _owner(c.user, detail) if c.user else None,
        "galleryCount": len(c.gallery),
    }
    if detail:
        data["gallery"] = [
            {
                "id":        g.id,
                "imageUrl":  g.imageUrl,
                "createdAt": g.createdAt.isoformat() if g.createdAt else None,
            }
            for g in c.gallery
        ]
    return data


def filter_cars(q: Query, filters: CarFilters) -> Query:
    """Apply only the filters that were supplied; each one narrows the result."""
    if filters.brand:
        q = q.filter(Car.brand.icontains(filters.brand, autoescape=True))
    if filters.condition is not None:
        q = q.filter(Car.condition == filters.condition)
    if filters.minPrice is not None:
        q = q.filter(Car.price >= filters.minPrice)
    if filters.maxPrice is not None:
        q = q.filter(Car.price <= filters.maxPrice)
    if filters.year is not None:
        q = q.filter(Car.year == filters.year)
    if filters.approved is not None:
        q = q.filter(Car.approved == filters.approved)
    if filters.userId is not None:
        q = q.filter(Car.userId == filters.userId)
    return q


class CarService:

    # ─── List ─────────────────────────────────────────────────────────────────
    def list_cars(
        self, db: Session, filters: CarFilters, page: int, limit: int,
    ) -> tuple[list[dict], int]:
        q = filter_cars(db.query(Car), filters)

        total = q.count()
        items = (
            q.options(joinedload(Car.user), selectinload(Car.gallery))
             .order_by(Car.createdAt.desc(), Car.id.desc())
             .offset((page - 1) * limit)
             .limit(limit)
             .all()
        )
        return [serialize_car(c) for c in items], total

    # ─── Get by ID ────────────────────────────────────────────────────────────
    def get_car(self, db: Session, car_id: int) -> dict:
        c = db.query(Car).filter(Car.id == car_id).first()
        if not c:
            raise NotFoundException("Car")
        return serialize_car(c, detail=True)

    # ─── Create ───────────────────────────────────────────────────────────────
    def create_car(
        self, db: Session, data: CarCreateForm, images: list[UploadFile] | None, owner_id: int,
    ) -> dict:
        buffered = read_images(images)
        if not buffered:
            raise ValidationException("At least one image is required", field="images")

        paths = store_images(buffered)
        car = Car(
            brand=data.brand,
            model=data.model,
            year=data.year,
            condition=data.condition,
            price=data.price,
            description=data.description,
            images=paths,
            approved=False,   # listings always start pending, whatever the role
            userId=owner_id,
        )
        car.gallery = [GalleryImage(imageUrl=p) for p in paths]
        db.add(car)
        try:
            db.commit()
        except Exception:
            db.rollback()
            discard_images(paths)
            raise
        db.refresh(car)
        logger.info(f"Car #{car.id} ({car.brand} {car.model}) created by user #{owner_id}")
        return serialize_car(car, detail=True)

    # ─── Update ───────────────────────────────────────────────────────────────
    def update_car(
        self, db: Session, car_id: int, data: CarUpdateForm, images: list[UploadFile] | None,
    ) -> dict:
        c = db.query(Car).filter(Car.id == car_id).first()
        if not c:
            raise NotFoundException("Car")

        buffered = read_images(images)
        for field, value in data.model_dump(exclude_none=True).items():
            setattr(c, field, value)

        paths = store_images(buffered) if buffered else []
        if paths:
            # New uploads replace the whole list
            c.images = paths
        try:
            db.commit()
        except Exception:
            db.rollback()
            discard_images(paths)
            raise
        db.refresh(c)
        logger.info(f"Car #{c.id} updated")
        return serialize_car(c, detail=True)

    # ─── Delete ───────────────────────────────────────────────────────────────
    def delete_car(self, db: Session, car_id: int) -> None:
        c = db.query(Car).filter(Car.id == car_id).first()
        if not c:
            raise NotFoundException("Car")
        db.delete(c)
        db.commit()
        logger.info(f"Car #{car_id} deleted")

    # ─── Approval ─────────────────────────────────────────────────────────────
    def set_approval(self, db: Session, car_id: int, approved: bool) -> dict:
        c = db.query(Car).filter(Car.id == car_id).first()
        if not c:
            raise NotFoundException("Car")
        c.approved = approved
        db.commit()
        db.refresh(c)
        logger.info(f"Car #{car_id} {'approved' if approved else 'rejected'}")
        return serialize_car(c)


car_service = CarService()
