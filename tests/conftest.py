import pytest

from app import create_app
from core.config import TestConfig
from domain.models import db, User, Subscription


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make(user_id="u1", email=None, tier=None, status="active"):
        user = User(user_id=user_id, email=email or f"{user_id}@example.com")
        db.session.add(user)
        if tier is not None:
            db.session.add(Subscription(user_id=user_id, tier=tier, status=status))
        db.session.commit()
        return user
    return _make


@pytest.fixture
def login(client):
    def _login(user):
        with client.session_transaction() as sess:
            sess["user"] = {"user_id": user.user_id}
    return _login
