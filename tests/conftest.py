from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

from config import TestConfig
from wellness import create_app, db
from wellness.achievements.clock import FixedClock
from wellness.cli import seed_badges
from wellness.models.journal import JournalEntry
from wellness.models.user import User

# Wednesday
NOW = datetime(2025, 11, 19, 10, 0)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def app(clock):
    app = create_app(TestConfig, clock=clock)
    with app.app_context():
        seed_badges()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def engine(app):
    return app.extensions["badge_engine"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(username=None):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        with app.app_context():
            user = User(email=f"{username}@example.com", username=username, display_name=username)
            user.set_password("secret123")
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user_id):
        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def write_entry(ctx, engine):
    """Persist an entry the way the journal handler does, then run the journal recompute."""

    def _write(user_id, text, when):
        db.session.add(JournalEntry(user_id=user_id, title="entry", text=text, created_at=when))
        db.session.commit()
        engine.recompute_journal_badges(user_id, text, when)

    return _write
