import pytest
from fastapi.testclient import TestClient

from conftest import API, TestingSessionLocal, auth_header
import app.main as main_module
from app.config import settings
from app.models import Car, RoleName, User
from app.services.auth_service import auth_service


@pytest.fixture
def admin(make_user):
    return make_user(RoleName.ADMIN, name="Root Admin")


class TestAdminGate:
    @pytest.mark.parametrize("path", ["/admin/stats", "/admin/users", "/admin/cars"])
    def test_requires_token(self, client, path):
        assert client.get(f"{API}{path}").status_code == 401

    @pytest.mark.parametrize("role", [RoleName.OWNER, RoleName.SHOP, RoleName.VENDOR])
    def test_non_admins_forbidden(self, client, make_user, role):
        resp = client.get(f"{API}/admin/stats", headers=auth_header(make_user(role)))
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"


class TestStats:
    def test_overview_counts_and_revenue(self, client, admin, make_user, make_car):
        seller = make_user(RoleName.SHOP)
        make_car(seller, price=10000.0, approved=True)
        make_car(seller, price=2500.0, approved=True)
        make_car(seller, price=99999.0, approved=False)

        data = client.get(f"{API}/admin/stats", headers=auth_header(admin)).json()["data"]
        assert data["overview"] == {
            "totalUsers": 2,
            "totalCars": 3,
            "approvedCars": 2,
            "pendingCars": 1,
            "totalRevenue": 12500.0,
        }
        assert len(data["recentCars"]) == 3
        seller_entry = next(u for u in data["recentUsers"] if u["id"] == seller.id)
        assert seller_entry["carCount"] == 3

    def test_empty_marketplace(self, client, admin):
        overview = client.get(f"{API}/admin/stats", headers=auth_header(admin)).json()["data"]["overview"]
        assert overview["totalCars"] == 0
        assert overview["totalRevenue"] == 0

    def test_recent_lists_are_capped(self, client, admin, make_user, make_car):
        seller = make_user()
        for _ in range(7):
            make_car(seller)
        data = client.get(f"{API}/admin/stats", headers=auth_header(admin)).json()["data"]
        assert len(data["recentCars"]) == 5


class TestUsers:
    def test_search_and_role_filter(self, client, admin, make_user):
        make_user(RoleName.SHOP, name="Speedy Motors")
        make_user(RoleName.VENDOR, name="Speedy Parts")
        make_user(RoleName.OWNER, name="Alice")
        headers = auth_header(admin)

        found = client.get(f"{API}/admin/users", params={"search": "speedy"}, headers=headers).json()["data"]
        assert {u["name"] for u in found["users"]} == {"Speedy Motors", "Speedy Parts"}

        shops = client.get(f"{API}/admin/users", params={"search": "speedy", "role": "SHOP"},
                           headers=headers).json()["data"]
        assert [u["name"] for u in shops["users"]] == ["Speedy Motors"]
        assert shops["pagination"]["total"] == 1

    def test_limit_clamped(self, client, admin):
        meta = client.get(f"{API}/admin/users", params={"limit": 51},
                          headers=auth_header(admin)).json()["data"]["pagination"]
        assert meta["limit"] == 50

    def test_delete_user_cascades_to_cars(self, client, db, admin, make_user, make_car):
        seller = make_user()
        make_car(seller)
        make_car(seller)
        resp = client.delete(f"{API}/admin/users/{seller.id}", headers=auth_header(admin))
        assert resp.status_code == 200
        assert db.query(User).filter(User.id == seller.id).count() == 0
        assert db.query(Car).filter(Car.userId == seller.id).count() == 0

    def test_cannot_delete_admin(self, client, admin, make_user):
        other_admin = make_user(RoleName.ADMIN)
        resp = client.delete(f"{API}/admin/users/{other_admin.id}", headers=auth_header(admin))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Cannot delete admin users"

    def test_cannot_delete_self(self, client, admin):
        assert client.delete(f"{API}/admin/users/{admin.id}", headers=auth_header(admin)).status_code == 400

    def test_delete_missing_user(self, client, admin):
        assert client.delete(f"{API}/admin/users/5555", headers=auth_header(admin)).status_code == 404


class TestModeration:
    def test_cars_include_pending(self, client, admin, make_user, make_car):
        seller = make_user()
        make_car(seller, approved=True)
        make_car(seller, approved=False)
        headers = auth_header(admin)

        everything = client.get(f"{API}/admin/cars", headers=headers).json()["data"]
        assert everything["pagination"]["total"] == 2

        pending = client.get(f"{API}/admin/cars", params={"approved": "false"}, headers=headers).json()["data"]
        assert [c["approved"] for c in pending["cars"]] == [False]

    def test_brand_filter(self, client, admin, make_user, make_car):
        seller = make_user()
        make_car(seller, brand="Subaru")
        make_car(seller, brand="Nissan")
        data = client.get(f"{API}/admin/cars", params={"brand": "sub"}, headers=auth_header(admin)).json()["data"]
        assert [c["brand"] for c in data["cars"]] == ["Subaru"]

    def test_approve_then_reject(self, client, admin, make_user, make_car):
        car = make_car(make_user(), approved=False)
        headers = auth_header(admin)

        resp = client.put(f"{API}/admin/cars/{car.id}/approve", json={"approved": True}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["message"] == "Car approved successfully"
        assert resp.json()["data"]["approved"] is True
        public = client.get(f"{API}/cars").json()["data"]["cars"]
        assert [c["id"] for c in public] == [car.id]

        resp = client.put(f"{API}/admin/cars/{car.id}/approve", json={"approved": False}, headers=headers)
        assert resp.json()["message"] == "Car rejected successfully"
        assert client.get(f"{API}/cars").json()["data"]["cars"] == []

    def test_owner_cannot_approve_own_car(self, client, make_user, make_car):
        owner = make_user(RoleName.SHOP)
        car = make_car(owner, approved=False)
        resp = client.put(f"{API}/admin/cars/{car.id}/approve", json={"approved": True}, headers=auth_header(owner))
        assert resp.status_code == 403

    def test_approve_requires_flag(self, client, admin, make_user, make_car):
        car = make_car(make_user(), approved=False)
        resp = client.put(f"{API}/admin/cars/{car.id}/approve", json={}, headers=auth_header(admin))
        assert resp.status_code == 400

    def test_approve_missing_car(self, client, admin):
        resp = client.put(f"{API}/admin/cars/8080/approve", json={"approved": True}, headers=auth_header(admin))
        assert resp.status_code == 404

    def test_delete_any_car(self, client, db, admin, make_user, make_car):
        car = make_car(make_user())
        assert client.delete(f"{API}/admin/cars/{car.id}", headers=auth_header(admin)).status_code == 200
        assert db.query(Car).filter(Car.id == car.id).count() == 0

    def test_delete_missing_car(self, client, admin):
        assert client.delete(f"{API}/admin/cars/8080", headers=auth_header(admin)).status_code == 404


class TestDefaultAdmin:
    def test_created_once_and_can_log_in(self, client, db, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", "root@example.com")
        monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "rootpass")

        first = auth_service.ensure_default_admin(db)
        second = auth_service.ensure_default_admin(db)
        assert first.id == second.id
        assert first.role == RoleName.ADMIN
        assert db.query(User).filter(User.email == "root@example.com").count() == 1

        resp = client.post(f"{API}/auth/login", json={"email": "root@example.com", "password": "rootpass"})
        assert resp.status_code == 200

    def test_startup_provisions_configured_admin(self, db, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", "boot@example.com")
        monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "bootpass")
        monkeypatch.setattr(main_module, "SessionLocal", TestingSessionLocal)
        monkeypatch.setattr(main_module, "check_db_connection", lambda: True)

        with TestClient(main_module.create_app()):
            pass
        admin = db.query(User).filter(User.email == "boot@example.com").one()
        assert admin.role == RoleName.ADMIN

    def test_skipped_without_credentials(self, db, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_ADMIN_EMAIL", None)
        assert auth_service.ensure_default_admin(db) is None


class TestAdminIdBounds:
    def test_out_of_range_ids_are_rejected(self, client, admin):
        headers = auth_header(admin)
        huge = "99999999999999999999"
        assert client.put(f"{API}/admin/cars/{huge}/approve", json={"approved": True}, headers=headers).status_code == 400
        assert client.delete(f"{API}/admin/cars/{huge}", headers=headers).status_code == 400
        assert client.delete(f"{API}/admin/users/0", headers=headers).status_code == 400

    def test_search_wildcards_are_literal(self, client, admin, make_user):
        make_user(RoleName.SHOP, name="Speedy Motors")
        make_user(RoleName.SHOP, name="100% Cars")
        headers = auth_header(admin)
        found = client.get(f"{API}/admin/users", params={"search": "%"}, headers=headers).json()["data"]
        assert [u["name"] for u in found["users"]] == ["100% Cars"]
        underscore = client.get(f"{API}/admin/users", params={"search": "_"}, headers=headers).json()["data"]
        assert underscore["users"] == []
