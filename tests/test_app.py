import logging

from flask.logging import default_handler

from dao import product as product_dao, user as user_dao
from tests.conftest import TEST_CONFIG


def test_dao_logs_reach_the_app_handler(app, caplog):
    assert default_handler in logging.getLogger("dao").handlers
    with caplog.at_level(logging.INFO, logger="dao"):
        user_dao.create_admin("root", "root@x.com", "rootpass")
    assert any(
        r.name == "dao.user" and r.levelno == logging.INFO for r in caplog.records
    )


def test_dao_log_level_follows_config():
    from app import create_app

    create_app({**TEST_CONFIG, "LOG_LEVEL": "INFO"})
    assert logging.getLogger("dao").level == logging.INFO
    create_app(TEST_CONFIG)
    dao_logger = logging.getLogger("dao")
    assert dao_logger.level == logging.WARNING
    assert dao_logger.handlers.count(default_handler) == 1


def test_unexpected_error_is_a_generic_500(client, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr(product_dao, "list_products", broken)
    with caplog.at_level(logging.ERROR):
        resp = client.get("/api/products")
    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Internal server error"}
    assert b"secret" not in resp.data
    assert any(r.exc_info and r.levelno == logging.ERROR for r in caplog.records)


def test_session_is_usable_after_a_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(product_dao, "list_products", broken)
    assert client.get("/api/products").status_code == 500
    monkeypatch.undo()
    assert client.get("/api/products").get_json() == []


def test_unknown_route_is_json(client):
    resp = client.get("/api/nowhere")
    assert resp.status_code == 404
    assert "message" in resp.get_json()
