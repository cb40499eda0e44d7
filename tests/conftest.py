"""Shared fixtures for hunterlog tests: in-memory database, factories, API client"""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hunterlog.core.auth.models import User
from hunterlog.core.dependencies import get_db
from hunterlog.core.hunts.models import DailyHunt
from hunterlog.core.missions.models import Mission
from hunterlog.core.quests.models import Quest
from hunterlog.core.quests.services import XP_BY_RARITY
from hunterlog.core.security import hash_password
from hunterlog.core.skills.models import Skill
from hunterlog.database.base import Base
from hunterlog.database.repository import HunterRepository
from hunterlog.main import app


NOW = datetime(2026, 3, 11, 15, 0, tzinfo=timezone.utc)
PASSWORD = "hunter2026"


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with every table created"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return HunterRepository(db_session)


# ============================================================================
# Entity Factories
# ============================================================================

@pytest.fixture
def make_user(db_session):
    """Create a committed user; keyword args override progression fields"""
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        values = {
            "email": f"hunter{counter['n']}@hunterlog.dev",
            "password_hash": hash_password(PASSWORD),
            "time_zone": "UTC",
            "level": 1,
            "current_xp": 0,
            "total_xp": 0,
            "rank": "E",
            "current_streak": 0,
            "longest_streak": 0,
        }
        values.update(fields)
        user = User(**values)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_mission(db_session):
    def _make(user, **fields):
        values = {
            "user_id": user.id,
            "title": "Clear the dungeon",
            "difficulty": 3,
            "status": "active",
            "total_xp_reward": 100,
        }
        values.update(fields)
        mission = Mission(**values)
        db_session.add(mission)
        db_session.commit()
        db_session.refresh(mission)
        return mission

    return _make


@pytest.fixture
def make_quest(db_session):
    def _make(user, mission=None, rarity="common", **fields):
        values = {
            "user_id": user.id,
            "mission_id": mission.id if mission is not None else None,
            "title": "Write the report",
            "rarity": rarity,
            "xp_reward": XP_BY_RARITY[rarity],
            "status": "active",
        }
        values.update(fields)
        quest = Quest(**values)
        db_session.add(quest)
        db_session.commit()
        db_session.refresh(quest)
        return quest

    return _make


@pytest.fixture
def make_hunt(db_session):
    def _make(user, **fields):
        values = {
            "user_id": user.id,
            "title": "Morning run",
            "is_weekly": False,
            "is_completed": False,
            "xp_reward": 20,
            "reset_date": NOW + timedelta(hours=9),
        }
        values.update(fields)
        hunt = DailyHunt(**values)
        db_session.add(hunt)
        db_session.commit()
        db_session.refresh(hunt)
        return hunt

    return _make


@pytest.fixture
def make_skill(db_session):
    def _make(**fields):
        values = {
            "name": "Shadow Step",
            "category": "agility",
            "required_level": 1,
        }
        values.update(fields)
        skill = Skill(**values)
        db_session.add(skill)
        db_session.commit()
        db_session.refresh(skill)
        return skill

    return _make


# ============================================================================
# API Fixtures
# ============================================================================

@pytest.fixture
def client(session_factory):
    """TestClient whose requests run against the in-memory database"""

    def _get_test_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a hunter through the API and return (user_json, auth_headers)"""
    counter = {"n": 0}

    def _register(email=None):
        counter["n"] += 1
        email = email or f"api{counter['n']}@hunterlog.dev"
        response = client.post(
            "/api/v1/auth/register",
            json={"email": email, "password": PASSWORD},
        )
        assert response.status_code == 201, response.text
        result = response.json()["result"]
        headers = {"Authorization": f"Bearer {result['tokens']['access_token']}"}
        return result["user"], headers

    return _register


@pytest.fixture
def auth(register):
    return register()
