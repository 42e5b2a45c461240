import pytest
from sqlalchemy import create_engine, text

from app import database


class TestDatabaseConnection:
    def test_configured_engine_answers(self):
        assert database.check_db_connection() is True
        with database.engine.connect() as conn:
            assert conn.execute(text("SELECT 1")).scalar() == 1

    def test_unreachable_database_reports_failure(self, monkeypatch):
        broken = create_engine("sqlite:////nonexistent-dir/marketplace.db")
        monkeypatch.setattr(database, "engine", broken)
        assert database.check_db_connection() is False

    def test_session_is_closed_after_request(self):
        gen = database.get_db()
        session = next(gen)
        assert session.execute(text("SELECT 1")).scalar() == 1
        with pytest.raises(StopIteration):
            next(gen)
