import pytest

from fechamento import create_app
from fechamento.extensions import db
from fechamento.services.auth import create_user

TEST_EMAIL = "ana@example.com"
TEST_PASSWORD = "s3cret-pw"


def make_app(**overrides):
    config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SECRET_KEY": "test-secret",
        "MAIL_SUPPRESS_SEND": True,
        "MAIL_DEFAULT_SENDER": "test@example.com",
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app():
    app = make_app()
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user_id(app):
    with app.app_context():
        return create_user(TEST_EMAIL, "Ana", TEST_PASSWORD).id


@pytest.fixture
def auth_headers(client, user_id):
    res = client.post("/api/login", json={"email": TEST_EMAIL, "password": TEST_PASSWORD})
    assert res.status_code == 200
    return {"x-access-token": res.get_json()["token"]}
