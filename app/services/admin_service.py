import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.models.car import Car
from app.models.role import RoleName
from app.models.user import User
from app.services.auth_service import serialize_user
from app.utils.exceptions import NotFoundException, AdminProtectedException

logger = logging.getLogger(__name__)

RECENT_ITEMS = 5


def _car_counts(db: Session, user_ids: list[int]) -> dict[int, int]:
    if not user_ids:
        return {}
    rows = db.query(Car.userId, func.count(Car.id))\
             .filter(Car.userId.in_(user_ids))\
             .group_by(Car.userId).all()
    return {user_id: count for user_id, count in rows}


class AdminService:

    # ─── Dashboard ────────────────────────────────────────────────────────────
    def stats(self, db: Session) -> dict:
        total_users   = db.query(func.count(User.id)).scalar() or 0
        total_cars    = db.query(func.count(Car.id)).scalar() or 0
        approved_cars = db.query(func.count(Car.id)).filter(Car.approved.is_(True)).scalar() or 0
        pending_cars  = db.query(func.count(Car.id)).filter(Car.approved.is_(False)).scalar() or 0
        revenue       = db.query(func.sum(Car.price)).filter(Car.approved.is_(True)).scalar() or 0

        recent_cars = db.query(Car).options(joinedload(Car.user))\
                        .order_by(Car.createdAt.desc(), Car.id.desc())\
                        .limit(RECENT_ITEMS).all()
        recent_users = db.query(User)\
                         .order_by(User.createdAt.desc(), User.id.desc())\
                         .limit(RECENT_ITEMS).all()
        counts = _car_counts(db, [u.id for u in recent_users])

        return {
            "overview": {
                "totalUsers":   total_users,
                "totalCars":    total_cars,
                "approvedCars": approved_cars,
                "pendingCars":  pending_cars,
                "totalRevenue": revenue,
            },
            "recentCars": [
                {
                    "id":        c.id,
                    "brand":     c.brand,
                    "model":     c.model,
                    "year":      c.year,
                    "price":     c.price,
                    "approved":  c.approved,
                    "createdAt": c.createdAt.isoformat() if c.createdAt else None,
                    "user":      {"name": c.user.name, "email": c.user.email},
                }
                for c in recent_cars
            ],
            "recentUsers": [
                {
                    "id":        u.id,
                    "name":      u.name,
                    "email":     u.email,
                    "createdAt": u.createdAt.isoformat() if u.createdAt else None,
                    "carCount":  counts.get(u.id, 0),
                }
                for u in recent_users
            ],
        }

    # ─── Users ────────────────────────────────────────────────────────────────
    def list_users(
        self, db: Session, page: int, limit: int,
        search: str | None, role: RoleName | None,
    ) -> tuple[list[dict], int]:
        q = db.query(User)

        if search:
            q = q.filter(or_(
                User.name.icontains(search, autoescape=True),
                User.email.icontains(search, autoescape=True),
            ))
        if role is not None:
            q = q.filter(User.role == role)

        total = q.count()
        users = q.order_by(User.createdAt.desc(), User.id.desc())\
                 .offset((page - 1) * limit).limit(limit).all()
        counts = _car_counts(db, [u.id for u in users])
        return [serialize_user(u, car_count=counts.get(u.id, 0)) for u in users], total

    def delete_user(self, db: Session, user_id: int, actor_id: int) -> None:
        u = db.query(User).filter(User.id == user_id).first()
        if not u:
            raise NotFoundException("User")
        if u.role == RoleName.ADMIN:
            raise AdminProtectedException()
        db.delete(u)
        db.commit()
        logger.info(f"User #{user_id} ({u.email}) deleted by admin #{actor_id}")


admin_service = AdminService()
