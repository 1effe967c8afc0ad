# tests/test_database.py

"""
Tests for the session helpers in database.py.
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from conftest import TestingSessionLocal, make_user
from database import get_session_context
from models import User
from models.enums import UserRole


class TestSessionContext:

    def test_commits_on_success(self, db):
        with patch("database.SessionLocal", TestingSessionLocal):
            with get_session_context() as session:
                make_user(session, UserRole.OWNER, "context@renta.rw")

        assert db.query(User).filter(User.email == "context@renta.rw").count() == 1

    def test_rolls_back_on_error(self, db):
        with patch("database.SessionLocal", TestingSessionLocal):
            with pytest.raises(RuntimeError):
                with get_session_context() as session:
                    session.add(User(email="lost@renta.rw", password="x", role=UserRole.OWNER,
                                     first_name="Lost", last_name="User"))
                    session.flush()
                    raise RuntimeError("boom")

        assert db.query(User).filter(User.email == "lost@renta.rw").count() == 0


class TestHealth:

    def test_reports_database_up(self, client):
        with patch("database.SessionLocal", TestingSessionLocal):
            response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["database"] == "up"

    def test_reports_database_down(self, client):
        with patch("database.SessionLocal", side_effect=OperationalError("SELECT 1", {}, Exception("refused"))):
            response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["database"] == "down"
