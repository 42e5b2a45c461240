import logging

from fastapi import UploadFile
from sqlalchemy.orm import Session, joinedload

from app.models.car import Car
from app.models.gallery import GalleryImage
from app.models.role import RoleName
from app.models.user import User
from app.utils.exceptions import NotFoundException, ForbiddenException, ValidationException
from app.utils.uploads import read_images, store_images, discard_images

logger = logging.getLogger(__name__)


def _serialize(g: GalleryImage) -> dict:
    return {
        "id":        g.id,
        "imageUrl":  g.imageUrl,
        "carId":     g.carId,
        "createdAt": g.createdAt.isoformat() if g.createdAt else None,
        "car": {
            "id":    g.car.id,
            "brand": g.car.brand,
            "model": g.car.model,
            "year":  g.car.year,
        } if g.car else None,
    }


def _can_manage(actor: User, car: Car) -> bool:
    return actor.role == RoleName.ADMIN or car.userId == actor.id


def list_images(db: Session, page: int, limit: int) -> tuple[list[dict], int]:
    q = db.query(GalleryImage)
    total = q.count()
    items = q.options(joinedload(GalleryImage.car))\
             .order_by(GalleryImage.createdAt.desc(), GalleryImage.id.desc())\
             .offset((page - 1) * limit).limit(limit).all()
    return [_serialize(g) for g in items], total


def add_image(db: Session, car_id: int, image: UploadFile | None, actor: User) -> dict:
    car = db.query(Car).filter(Car.id == car_id).first()
    if not car:
        raise NotFoundException("Car")
    if not _can_manage(actor, car):
        raise ForbiddenException("You can only add images to your own cars")

    buffered = read_images([image] if image else [], max_count=1)
    if not buffered:
        raise ValidationException("No image file provided", field="image")

    paths = store_images(buffered, field="image")
    g = GalleryImage(carId=car.id, imageUrl=paths[0])
    db.add(g)
    try:
        db.commit()
    except Exception:
        db.rollback()
        discard_images(paths)
        raise
    db.refresh(g)
    logger.info(f"Gallery image #{g.id} added to car #{car.id}")
    return _serialize(g)


def delete_image(db: Session, image_id: int, actor: User) -> None:
    g = db.query(GalleryImage).filter(GalleryImage.id == image_id).first()
    if not g:
        raise NotFoundException("Gallery image")
    if not _can_manage(actor, g.car):
        raise ForbiddenException("You do not have permission to delete this image")
    db.delete(g)
    db.commit()
    logger.info(f"Gallery image #{image_id} deleted by user #{actor.id}")
