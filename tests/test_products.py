import pytest

from dao import product as product_dao
from utils.errors import ValidationError
from tests.conftest import auth, register_supplier


def test_create_then_get_round_trip(client, make_product):
    created = make_product(
        name="Plaque de plâtre BA13",
        description="2500x1200",
        price=8.9,
        stock=40,
        imageUrl="http://img/ba13.png",
    )
    fetched = client.get(f"/api/products/{created['id']}").get_json()
    assert fetched == created
    for key, value in {
        "name": "Plaque de plâtre BA13",
        "description": "2500x1200",
        "price": 8.9,
        "stock": 40,
        "imageUrl": "http://img/ba13.png",
    }.items():
        assert fetched[key] == value
    assert fetched["createdAt"]


def test_missing_product_is_404(client):
    assert client.get("/api/products/999").status_code == 404


def test_supplier_id_comes_from_session(client, supplier_token, make_product):
    other = register_supplier(client, "carol", "carol@x.com")
    created = make_product(supplierId=other["id"] + 100)
    mine = client.get("/api/supplier/profile", headers=auth(supplier_token)).get_json()
    assert created["supplierId"] == mine["id"]

    resp = client.put(
        f"/api/supplier/products/{created['id']}",
        json={"supplierId": 12345, "price": 13},
        headers=auth(supplier_token),
    )
    assert resp.status_code == 200
    assert resp.get_json()["supplierId"] == mine["id"]
    assert resp.get_json()["price"] == 13.0


def test_only_owner_updates_or_deletes(client, make_product):
    product = make_product()
    intruder = register_supplier(client, "carol", "carol@x.com")["token"]
    url = f"/api/supplier/products/{product['id']}"
    assert client.put(url, json={"price": 1}, headers=auth(intruder)).status_code == 403
    assert client.delete(url, headers=auth(intruder)).status_code == 403
    assert client.delete("/api/supplier/products/999", headers=auth(intruder)).status_code == 404


def test_owner_deletes(client, supplier_token, make_product):
    product = make_product()
    url = f"/api/supplier/products/{product['id']}"
    assert client.delete(url, headers=auth(supplier_token)).status_code == 204
    assert client.get(f"/api/products/{product['id']}").status_code == 404


@pytest.mark.parametrize(
    "payload",
    [{"price": -1}, {"price": "abc"}, {"stock": -2}, {"stock": 1.5}, {"name": ""}],
)
def test_invalid_product_payloads(client, supplier_token, payload):
    body = {"name": "Brick", "price": 1, "stock": 1}
    body.update(payload)
    resp = client.post("/api/supplier/products", json=body, headers=auth(supplier_token))
    assert resp.status_code == 400


def test_filter_is_conjunctive(client, make_product):
    make_product(name="cheap", price=5, stock=10)
    make_product(name="in range", price=15, stock=3)
    make_product(name="in range no stock", price=12, stock=0)
    make_product(name="edge low", price=10, stock=1)
    make_product(name="edge high", price=20, stock=1)
    make_product(name="expensive", price=25, stock=9)

    resp = client.get("/api/products/filter?minPrice=10&maxPrice=20&inStock=true")
    names = {p["name"] for p in resp.get_json()}
    assert names == {"in range", "edge low", "edge high"}
    for p in resp.get_json():
        assert 10 <= p["price"] <= 20 and p["stock"] > 0


def test_filter_without_clauses_returns_everything_newest_first(client, make_product):
    first = make_product(name="first")
    second = make_product(name="second")
    ids = [p["id"] for p in client.get("/api/products/filter").get_json()]
    assert ids == [second["id"], first["id"]]


def test_filter_by_category_and_supplier(client, admin_token, make_product):
    cat = client.post(
        "/api/admin/categories", json={"name": "Bois"}, headers=auth(admin_token)
    ).get_json()
    wood = make_product(name="Plank", categoryId=cat["id"])
    make_product(name="Cement")
    other = register_supplier(client, "carol", "carol@x.com")["token"]
    theirs = make_product(token=other, name="Plank too", categoryId=cat["id"])

    by_cat = client.get(f"/api/products/filter?categoryIds={cat['id']}").get_json()
    assert {p["id"] for p in by_cat} == {wood["id"], theirs["id"]}

    both = client.get(
        f"/api/products/filter?categoryIds={cat['id']}&supplierIds={wood['supplierId']}"
    ).get_json()
    assert [p["id"] for p in both] == [wood["id"]]


def test_search_is_case_insensitive_on_name_or_description(client, make_product):
    make_product(name="Ciment gris", description=None)
    make_product(name="Sable", description="idéal pour CIMENT")
    make_product(name="Brique")
    found = client.get("/api/products/search?q=ciment").get_json()
    assert {p["name"] for p in found} == {"Ciment gris", "Sable"}


def test_empty_search_is_a_caller_error(client, app):
    assert client.get("/api/products/search").status_code == 400
    assert client.get("/api/products/search?q=").status_code == 400
    with pytest.raises(ValidationError):
        product_dao.search_products("   ")


def test_pagination(client, make_product):
    made = [make_product(name=f"p{i}") for i in range(5)]
    page1 = client.get("/api/products?page=1&limit=2").get_json()
    page3 = client.get("/api/products?page=3&limit=2").get_json()
    assert [p["name"] for p in page1] == ["p4", "p3"]
    assert [p["id"] for p in page3] == [made[0]["id"]]


def test_supplier_low_stock_and_limit(client, supplier_token, make_product):
    make_product(name="plenty", stock=50)
    make_product(name="few", stock=9)
    make_product(name="none", stock=0)
    low = client.get("/api/supplier/products?lowStock=true", headers=auth(supplier_token))
    assert {p["name"] for p in low.get_json()} == {"few", "none"}
    limited = client.get("/api/supplier/products?limit=1", headers=auth(supplier_token))
    assert [p["name"] for p in limited.get_json()] == ["none"]


def test_deleting_category_clears_product_reference(client, admin_token, make_product):
    cat = client.post(
        "/api/admin/categories", json={"name": "Isolation"}, headers=auth(admin_token)
    ).get_json()
    product = make_product(categoryId=cat["id"])
    assert client.get(f"/api/categories/{cat['id']}/products").get_json()[0]["id"] == product["id"]

    resp = client.delete(f"/api/admin/categories/{cat['id']}", headers=auth(admin_token))
    assert resp.status_code == 204
    assert client.get(f"/api/categories/{cat['id']}").status_code == 404
    assert client.get(f"/api/products/{product['id']}").get_json()["categoryId"] is None


def test_unknown_category_is_rejected(client, supplier_token):
    resp = client.post(
        "/api/supplier/products",
        json={"name": "x", "price": 1, "categoryId": 42},
        headers=auth(supplier_token),
    )
    assert resp.status_code == 400


def test_category_update(client, admin_token):
    cat = client.post(
        "/api/admin/categories", json={"name": "Bois"}, headers=auth(admin_token)
    ).get_json()
    resp = client.put(
        f"/api/admin/categories/{cat['id']}",
        json={"description": "Charpente"},
        headers=auth(admin_token),
    )
    assert resp.get_json() == {"id": cat["id"], "name": "Bois", "description": "Charpente"}
    assert client.put(
        "/api/admin/categories/999", json={"name": "x"}, headers=auth(admin_token)
    ).status_code == 404


def test_public_supplier_directory(client, supplier_token):
    register_supplier(client, "ana", "ana@x.com")
    listed = client.get("/api/suppliers").get_json()
    assert [s["companyName"] for s in listed] == ["Bob Materials", "Bob Materials"]
    assert all("password" not in s for s in listed)


@pytest.mark.parametrize("q", ["%", "_", "25%"])
def test_search_wildcards_are_literal(client, make_product, q):
    make_product(name="Cement 25kg")
    make_product(name="Sand")
    assert client.get("/api/products/search", query_string={"q": q}).get_json() == []


def test_search_matches_literal_percent(client, make_product):
    make_product(name="Mortier 100% chaux")
    make_product(name="Sand")
    hits = client.get("/api/products/search", query_string={"q": "100%"}).get_json()
    assert [p["name"] for p in hits] == ["Mortier 100% chaux"]
