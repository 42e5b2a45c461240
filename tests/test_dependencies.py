import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from conftest import TestingSessionLocal, auth_header
from app.database import get_db
from app.dependencies import get_shop_or_vendor, get_car_owner_or_admin, require_roles
from app.middleware.error_handler import app_exception_handler
from app.models import RoleName, User
from app.utils.exceptions import AppException


@pytest.fixture
def guarded_app(db):
    """A bare app exposing the guards directly."""
    app = FastAPI()
    app.add_exception_handler(AppException, app_exception_handler)

    @app.get("/business")
    def business(user: User = Depends(get_shop_or_vendor)):
        return {"id": user.id, "email": user.email, "role": user.role.value}

    @app.get("/vendors-only")
    def vendors_only(user: User = Depends(require_roles(RoleName.VENDOR))):
        return {"role": user.role.value}

    @app.get("/cars/{car_id}/guard")
    def guarded(car_id: int, user: User = Depends(get_car_owner_or_admin)):
        return {"car": car_id, "by": user.id}

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


class TestRoleSets:
    @pytest.mark.parametrize("role,allowed", [
        (RoleName.OWNER, False),
        (RoleName.SHOP, True),
        (RoleName.VENDOR, True),
        (RoleName.ADMIN, True),
    ])
    def test_shop_or_vendor(self, guarded_app, make_user, role, allowed):
        user = make_user(role)
        resp = guarded_app.get("/business", headers=auth_header(user))
        assert resp.status_code == (200 if allowed else 403)
        if allowed:
            assert resp.json() == {"id": user.id, "email": user.email, "role": role.value}

    @pytest.mark.parametrize("role", [RoleName.SHOP, RoleName.ADMIN])
    def test_exact_role(self, guarded_app, make_user, role):
        assert guarded_app.get("/vendors-only", headers=auth_header(make_user(role))).status_code == 403


class TestOwnership:
    def test_owner_passes(self, guarded_app, make_user, make_car):
        owner = make_user()
        car = make_car(owner)
        assert guarded_app.get(f"/cars/{car.id}/guard", headers=auth_header(owner)).json() == {"car": car.id, "by": owner.id}

    def test_admin_bypasses_lookup(self, guarded_app, make_user):
        # No such car: admins are let through and the handler decides
        admin = make_user(RoleName.ADMIN)
        assert guarded_app.get("/cars/12345/guard", headers=auth_header(admin)).status_code == 200

    def test_non_owner(self, guarded_app, make_user, make_car):
        car = make_car(make_user())
        assert guarded_app.get(f"/cars/{car.id}/guard", headers=auth_header(make_user())).status_code == 403

    def test_missing_car(self, guarded_app, make_user):
        assert guarded_app.get("/cars/12345/guard", headers=auth_header(make_user())).status_code == 404
