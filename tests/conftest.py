import pytest
from flask import g

from app import create_app
from configs import db
from dao import user as user_dao

TEST_CONFIG = {
    "TESTING": True,
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "AUTO_CREATE_TABLES": True,
    "LOG_LEVEL": "WARNING",
    "SECRET_KEY": "test",
}


@pytest.fixture
def app():
    app = create_app(TEST_CONFIG)

    # the test-wide app context below is shared by every request, so drop
    # Flask-Login's per-request user cache as a real request boundary would
    @app.teardown_request
    def _forget_request_user(exc):
        g.pop("_login_user", None)

    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    # tokens travel in headers so one client can act as several users
    return app.test_client(use_cookies=False)


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def register_client(client, username="alice", email="alice@x.com", password="secret1"):
    resp = client.post(
        "/api/register/client",
        json={
            "username": username,
            "email": email,
            "password": password,
            "firstName": "Alice",
            "lastName": "Martin",
        },
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def register_supplier(client, username="bob", email="bob@x.com", password="secret1"):
    resp = client.post(
        "/api/register/supplier",
        json={
            "username": username,
            "email": email,
            "password": password,
            "companyName": "Bob Materials",
            "contactName": "Bob Builder",
        },
    )
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def login(client, email, password):
    resp = client.post("/api/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()["token"]


@pytest.fixture
def client_token(client):
    return register_client(client)["token"]


@pytest.fixture
def supplier_token(client):
    return register_supplier(client)["token"]


@pytest.fixture
def admin_token(app, client):
    user_dao.create_admin("root", "root@x.com", "rootpass")
    return login(client, "root@x.com", "rootpass")


@pytest.fixture
def make_product(client, supplier_token):
    def _make(token=None, **fields):
        payload = {"name": "Cement 25kg", "price": 12.5, "stock": 5}
        payload.update(fields)
        resp = client.post(
            "/api/supplier/products", json=payload, headers=auth(token or supplier_token)
        )
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()

    return _make
