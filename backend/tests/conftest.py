import os
import sys
from datetime import datetime
import pytest

# Ensure the backend root (containing the `minigame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from minigame import create_app, db


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    CORS_ORIGINS = ['http://localhost:3000']
    LOG_LEVEL = 'DEBUG'
    SESSION_TTL_HOURS = 168
    GUEST_SESSION_TTL_HOURS = 24
    GUEST_RETENTION_DAYS = 7
    GUEST_SWEEP_INTERVAL_SEC = 86400
    GUEST_USERNAME_PREFIX = 'guest_'
    LEADERBOARD_LIMIT = 100
    MAX_SCORE = 10000000
    COIN_DIVISOR = 10
    MAX_AVATAR_LENGTH = 5000


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import minigame.models  # noqa: F401
        db.create_all()
    # Requests run without an outer app context so that per-request state
    # (flask.g, Flask-Login's current_user) starts fresh for every call
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_context(flask_app):
    with flask_app.app_context():
        yield flask_app
        db.session.remove()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def frozen_now(monkeypatch):
    """Pin ``clock.utcnow()``; returns a setter for moving the clock."""
    from minigame import clock

    state = {'now': datetime(2025, 6, 15, 12, 0, 0)}
    monkeypatch.setattr(clock, 'utcnow', lambda: state['now'])

    def set_now(value):
        state['now'] = value
        return value

    return set_now


@pytest.fixture()
def guest_session(client):
    res = client.post('/api/guest-login', json={'nickname': 'Speedy'})
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture()
def user_session(client):
    res = client.post('/api/register', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 201
    return res.get_json()


@pytest.fixture()
def file_app(tmp_path):
    """App bound to an empty file-backed SQLite DB, shared across threads."""
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'minigame.db'}"

    application = create_app(FileConfig)
    yield application
    with application.app_context():
        db.session.remove()
        db.engine.dispose()
