"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Order matters: import parent tables before child tables.
"""

from app.models.role import RoleName
from app.models.user import User
from app.models.car import Car, CarCondition
from app.models.gallery import GalleryImage

__all__ = [
    "RoleName",
    "User",
    "Car",
    "CarCondition",
    "GalleryImage",
]
