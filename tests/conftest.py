"""
Shared test fixtures for the Defis test suite.

Every test gets its own in-memory SQLite database; services are called with an
explicit session, and the API client overrides ``get_session`` to use it.
"""

import os

# Must be set before defis.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test_secret_key_not_for_production"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, Session

from defis.main import app
from defis.models import (  # noqa: F401
    profile, challenge, challenge_vote, challenge_comment,
    sent_challenge, completed_challenge, preferences, reward
)
from defis.models.challenge import Challenge, Category, Difficulty
from defis.models.profile import Profile
from defis.models.reward import Reward
from defis.services.auth import create_access_token
from defis.services.database import build_engine, get_session


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def make_profile(session):
    """Factory inserting a profile with predictable codes."""
    def _make(user_id, points=0, is_curator=False, partner_id=None):
        p = Profile(
            id=user_id,
            username=user_id,
            referral_code=f"R{user_id.upper()}"[:8],
            partner_code=f"P{user_id.upper()}"[:8],
            points=points,
            level=points // 100 + 1,
            is_curator=is_curator,
            partner_id=partner_id,
        )
        session.add(p)
        session.commit()
        session.refresh(p)
        return p
    return _make


@pytest.fixture
def couple(session, make_profile):
    """Two profiles already paired with each other."""
    alice = make_profile("alice")
    bob = make_profile("bob")
    alice.partner_id = bob.id
    bob.partner_id = alice.id
    session.add(alice)
    session.add(bob)
    session.commit()
    return alice, bob


@pytest.fixture
def make_challenge(session):
    def _make(
        title="Dîner aux chandelles",
        category=Category.ROMANTIQUE,
        difficulty=Difficulty.FACILE,
        points_reward=10,
        is_approved=True,
        is_community=False,
        created_by=None,
    ):
        c = Challenge(
            title=title,
            description=f"{title} description",
            category=category,
            difficulty=difficulty,
            points_reward=points_reward,
            is_approved=is_approved,
            is_community=is_community,
            created_by=created_by,
        )
        session.add(c)
        session.commit()
        session.refresh(c)
        return c
    return _make


@pytest.fixture
def make_reward(session):
    def _make(name, points_required, icon="*"):
        r = Reward(name=name, description=f"{name} badge", icon=icon, points_required=points_required)
        session.add(r)
        session.commit()
        session.refresh(r)
        return r
    return _make


@pytest.fixture
def client(engine):
    """API client bound to the test database. Startup hooks are not run."""
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id):
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers
