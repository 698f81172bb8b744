from datetime import timedelta

import pytest

from configs import db
from dao import quote as quote_dao
from db.models.quote import Quote, QuoteKind, QuoteLine, QuoteStatus
from utils.dates import parse_date, utcnow
from utils.errors import ValidationError
from tests.conftest import auth, register_client, register_supplier


def request_quote(client, token, lines, **extra):
    body = {"lines": lines}
    body.update(extra)
    return client.post("/api/client/quotes", json=body, headers=auth(token))


def supplier_id_of(client, token):
    return client.get("/api/supplier/profile", headers=auth(token)).get_json()["id"]


def client_id_of(client, token):
    return client.get("/api/client/profile", headers=auth(token)).get_json()["id"]


def test_request_snapshots_prices_and_defaults_validity(client, client_token, make_product):
    product = make_product(price=12.5)
    before = utcnow()
    resp = request_quote(client, client_token, [{"productId": product["id"], "quantity": 4}])
    assert resp.status_code == 201
    quote = resp.get_json()
    assert quote["kind"] == "request"
    assert quote["status"] == "pending"
    assert quote["total"] == 50.0
    assert quote["lines"][0]["priceAtQuote"] == 12.5

    valid_until = parse_date(quote["validUntil"])
    assert before + timedelta(days=30) <= valid_until <= utcnow() + timedelta(days=30)


def test_explicit_valid_until_and_bad_dates(client, client_token, make_product):
    product = make_product()
    line = [{"productId": product["id"], "quantity": 1}]
    ok = request_quote(client, client_token, line, validUntil="2027-01-15T00:00:00Z").get_json()
    assert ok["validUntil"] == "2027-01-15T00:00:00"
    assert request_quote(client, client_token, line, validUntil="soon").status_code == 400


def test_empty_quote_is_rejected(client, client_token):
    assert request_quote(client, client_token, []).status_code == 400
    assert Quote.query.count() == 0


def test_unknown_target_supplier(client, client_token, make_product):
    product = make_product()
    resp = request_quote(
        client, client_token, [{"productId": product["id"], "quantity": 1}], supplierId=999
    )
    assert resp.status_code == 404
    assert QuoteLine.query.count() == 0


def test_request_transitions(client, client_token, admin_token, make_product):
    product = make_product()
    quote = request_quote(client, client_token, [{"productId": product["id"], "quantity": 1}]).get_json()
    url = f"/api/client/quotes/{quote['id']}/status"

    # offers speak another vocabulary
    assert client.patch(url, json={"status": "accepted"}, headers=auth(client_token)).status_code == 400
    resp = client.patch(url, json={"status": "approved"}, headers=auth(client_token))
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "approved"
    admin_url = f"/api/admin/quotes/{quote['id']}/status"
    assert client.put(admin_url, json={"status": "rejected"}, headers=auth(admin_token)).status_code == 400


def test_other_client_is_forbidden_and_status_unchanged(client, client_token, make_product):
    product = make_product()
    quote = request_quote(client, client_token, [{"productId": product["id"], "quantity": 1}]).get_json()
    intruder = register_client(client, "eve", "eve@x.com")["token"]

    resp = client.patch(
        f"/api/client/quotes/{quote['id']}/status",
        json={"status": "rejected"},
        headers=auth(intruder),
    )
    assert resp.status_code == 403
    assert db.session.get(Quote, quote["id"]).status is QuoteStatus.PENDING
    assert client.get(f"/api/client/quotes/{quote['id']}", headers=auth(intruder)).status_code == 403


def test_targeted_supplier_may_answer_a_request(client, client_token, supplier_token, make_product):
    product = make_product()
    bob_id = supplier_id_of(client, supplier_token)
    quote = request_quote(
        client, client_token, [{"productId": product["id"], "quantity": 2}], supplierId=bob_id
    ).get_json()
    outsider = register_supplier(client, "carol", "carol@x.com")["token"]

    url = f"/api/supplier/quotes/{quote['id']}/status"
    assert client.patch(url, json={"status": "approved"}, headers=auth(outsider)).status_code == 403
    assert client.patch(url, json={"status": "approved"}, headers=auth(supplier_token)).status_code == 200
    listed = client.get("/api/supplier/quotes", headers=auth(supplier_token)).get_json()
    assert [q["id"] for q in listed] == [quote["id"]]


def test_untargeted_request_is_not_a_suppliers_business(client, client_token, supplier_token, make_product):
    product = make_product()
    quote = request_quote(client, client_token, [{"productId": product["id"], "quantity": 1}]).get_json()
    resp = client.patch(
        f"/api/supplier/quotes/{quote['id']}/status",
        json={"status": "approved"},
        headers=auth(supplier_token),
    )
    assert resp.status_code == 403


def test_supplier_offer_with_negotiated_price(client, client_token, supplier_token, make_product):
    product = make_product(price=12.5)
    alice_id = client_id_of(client, client_token)
    resp = client.post(
        "/api/supplier/quotes",
        json={
            "clientId": alice_id,
            "items": [
                {"productId": product["id"], "quantity": 10, "price": 11},
                {"productId": product["id"], "quantity": 1},
            ],
        },
        headers=auth(supplier_token),
    )
    assert resp.status_code == 201
    offer = resp.get_json()
    assert offer["kind"] == "offer"
    assert offer["supplierId"] == supplier_id_of(client, supplier_token)
    assert offer["total"] == 122.5

    listed = client.get("/api/client/quotes", headers=auth(client_token)).get_json()
    assert [q["id"] for q in listed] == [offer["id"]]

    url = f"/api/client/quotes/{offer['id']}/status"
    assert client.patch(url, json={"status": "approved"}, headers=auth(client_token)).status_code == 400
    assert client.patch(url, json={"status": "accepted"}, headers=auth(client_token)).get_json()["status"] == "accepted"
    assert client.patch(url, json={"status": "rejected"}, headers=auth(client_token)).status_code == 400


def test_offer_only_covers_own_products(client, client_token, supplier_token, make_product):
    other = register_supplier(client, "carol", "carol@x.com")["token"]
    foreign = make_product(token=other, name="Brique")
    resp = client.post(
        "/api/supplier/quotes",
        json={
            "clientId": client_id_of(client, client_token),
            "items": [{"productId": foreign["id"], "quantity": 1}],
        },
        headers=auth(supplier_token),
    )
    assert resp.status_code == 400
    assert Quote.query.count() == 0


def test_offer_to_unknown_client(client, supplier_token, make_product):
    product = make_product()
    resp = client.post(
        "/api/supplier/quotes",
        json={"clientId": 999, "items": [{"productId": product["id"], "quantity": 1}]},
        headers=auth(supplier_token),
    )
    assert resp.status_code == 404


def test_status_value_is_checked_before_ownership(client, client_token, make_product):
    product = make_product()
    quote = request_quote(client, client_token, [{"productId": product["id"], "quantity": 1}]).get_json()
    intruder = register_client(client, "eve", "eve@x.com")["token"]
    resp = client.patch(
        f"/api/client/quotes/{quote['id']}/status",
        json={"status": "bogus"},
        headers=auth(intruder),
    )
    assert resp.status_code == 400


def test_missing_quote(client, client_token):
    resp = client.patch(
        "/api/client/quotes/42/status", json={"status": "approved"}, headers=auth(client_token)
    )
    assert resp.status_code == 404


@pytest.mark.parametrize(
    "kind, allowed",
    [
        (QuoteKind.REQUEST, {"pending", "approved", "rejected"}),
        (QuoteKind.OFFER, {"pending", "accepted", "rejected"}),
    ],
)
def test_vocabularies_stay_apart(kind, allowed):
    assert {s.value for s in quote_dao.QUOTE_TRANSITIONS[kind]} == allowed
    for value in {"pending", "approved", "accepted", "rejected"} - allowed:
        with pytest.raises(ValidationError):
            quote_dao.to_quote_status(kind, value)


def test_admin_deletes_quote(client, client_token, admin_token, make_product):
    product = make_product()
    quote = request_quote(client, client_token, [{"productId": product["id"], "quantity": 1}]).get_json()
    assert client.delete(f"/api/admin/quotes/{quote['id']}", headers=auth(admin_token)).status_code == 204
    db.session.expire_all()
    assert QuoteLine.query.count() == 0
    assert client.delete(f"/api/admin/quotes/{quote['id']}", headers=auth(admin_token)).status_code == 404
