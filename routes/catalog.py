# routes/catalog.py
from flask import Blueprint, jsonify, request

from dao import category as category_dao, product as product_dao, user as user_dao
from utils.errors import NotFound
from utils.http import bool_arg, int_arg
from utils.validators import parse_id_list

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")


@catalog_bp.route("/products")
def products_list():
    products = product_dao.list_products(
        page=int_arg("page", 1), limit=int_arg("limit", 10)
    )
    return jsonify([p.to_dict() for p in products])


@catalog_bp.route("/products/search")
def products_search():
    products = product_dao.search_products(request.args.get("q"))
    return jsonify([p.to_dict() for p in products])


@catalog_bp.route("/products/filter")
def products_filter():
    products = product_dao.filter_products(
        category_ids=parse_id_list(request.args.get("categoryIds"), "categoryIds"),
        supplier_ids=parse_id_list(request.args.get("supplierIds"), "supplierIds"),
        min_price=request.args.get("minPrice") or None,
        max_price=request.args.get("maxPrice") or None,
        in_stock=bool_arg("inStock"),
    )
    return jsonify([p.to_dict() for p in products])


@catalog_bp.route("/products/<int:product_id>")
def product_detail(product_id: int):
    p = product_dao.get_product(product_id)
    if not p:
        raise NotFound("Product not found")
    return jsonify(p.to_dict())


@catalog_bp.route("/categories")
def categories_list():
    return jsonify([c.to_dict() for c in category_dao.list_categories()])


@catalog_bp.route("/categories/<int:category_id>")
def category_detail(category_id: int):
    c = category_dao.get_category(category_id)
    if not c:
        raise NotFound("Category not found")
    return jsonify(c.to_dict())


@catalog_bp.route("/categories/<int:category_id>/products")
def category_products(category_id: int):
    products = product_dao.list_products_by_category(category_id)
    return jsonify([p.to_dict() for p in products])


@catalog_bp.route("/suppliers")
def suppliers_list():
    return jsonify([s.to_dict() for s in user_dao.list_suppliers()])
