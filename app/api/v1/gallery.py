from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.common import MAX_ID, PaginationParams, success_response, paginated_response
from app.services import gallery_service as svc

router = APIRouter(prefix="/gallery")


@router.get("", summary="List gallery images (paginated)")
def list_images(
    page:  int     = Query(1),
    limit: int     = Query(20),
    db:    Session = Depends(get_db),
):
    p = PaginationParams(page=page, limit=limit).clamp()
    data, total = svc.list_images(db, p.page, p.limit)
    return paginated_response(None, "images", data, total, p.page, p.limit)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add an image to one of your cars")
def add_image(
    carId: int                  = Form(..., ge=1, le=MAX_ID),
    image: Optional[UploadFile] = File(None),
    db:    Session              = Depends(get_db),
    current_user: User          = Depends(get_current_user),
):
    data = svc.add_image(db, carId, image, current_user)
    return success_response("Image uploaded to gallery successfully", data)


@router.delete("/{image_id}", summary="Delete a gallery image (car owner or admin)")
def delete_image(
    image_id: int     = Path(..., ge=1, le=MAX_ID),
    db:       Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    svc.delete_image(db, image_id, current_user)
    return success_response("Gallery image deleted successfully", None)
