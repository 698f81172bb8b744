# routes/supplier.py
from flask import Blueprint, current_app, jsonify

from dao import (
    order as order_dao,
    product as product_dao,
    quote as quote_dao,
    stats as stats_dao,
    user as user_dao,
)
from db.models.user import UserRole
from utils.auth import current_identity, scope_guard
from utils.errors import Forbidden, NotFound
from utils.http import bool_arg, int_arg, json_body

supplier_bp = scope_guard(
    Blueprint("supplier_api", __name__, url_prefix="/api/supplier"), UserRole.SUPPLIER
)


def _supplier():
    return user_dao.require_supplier(current_identity())


def _owned_product(product_id: int):
    product = product_dao.get_product(product_id)
    if not product:
        raise NotFound("Product not found")
    supplier = _supplier()
    if product.supplier_id != supplier.id:
        raise Forbidden("You don't have permission to modify this product")
    return product


# -------- products --------
@supplier_bp.route("/products")
def products_list():
    products = product_dao.list_products_by_supplier(
        _supplier().id, low_stock=bool_arg("lowStock"), limit=int_arg("limit")
    )
    return jsonify([p.to_dict() for p in products])


@supplier_bp.route("/products", methods=["POST"])
def products_create():
    supplier = _supplier()
    # supplierId always comes from the session, never from the body
    product = product_dao.create_product(supplier.id, json_body())
    current_app.logger.info("product %s created by supplier %s", product.id, supplier.id)
    return jsonify(product.to_dict()), 201


@supplier_bp.route("/products/<int:product_id>", methods=["PUT"])
def products_update(product_id: int):
    _owned_product(product_id)
    product = product_dao.update_product(product_id, json_body())
    return jsonify(product.to_dict())


@supplier_bp.route("/products/<int:product_id>", methods=["DELETE"])
def products_delete(product_id: int):
    _owned_product(product_id)
    product_dao.delete_product(product_id)
    return "", 204


# -------- orders & stats --------
@supplier_bp.route("/orders")
def orders_list():
    orders = order_dao.list_orders_by_supplier(_supplier().id, limit=int_arg("limit"))
    return jsonify([o.to_dict() for o in orders])


@supplier_bp.route("/stats")
def stats():
    return jsonify(stats_dao.supplier_stats(_supplier().id))


# -------- profile --------
@supplier_bp.route("/profile")
def profile():
    return jsonify(_supplier().to_dict())


@supplier_bp.route("/profile", methods=["PUT"])
def profile_update():
    supplier = user_dao.update_supplier(_supplier().id, json_body())
    return jsonify(supplier.to_dict())


# -------- quotes (offers) --------
@supplier_bp.route("/quotes")
def quotes_list():
    quotes = quote_dao.list_quotes_by_supplier(_supplier().id)
    return jsonify([q.to_dict(include_lines=True) for q in quotes])


@supplier_bp.route("/quotes", methods=["POST"])
def quotes_create():
    supplier = _supplier()
    data = json_body()
    quote = quote_dao.create_supplier_quote(
        supplier.id,
        data.get("clientId"),
        data.get("items"),
        valid_until=data.get("validUntil"),
    )
    return jsonify(quote.to_dict(include_lines=True)), 201


@supplier_bp.route("/quotes/<int:quote_id>/status", methods=["PATCH"])
def quote_status(quote_id: int):
    quote = quote_dao.update_quote_status(
        current_identity(), quote_id, json_body().get("status")
    )
    return jsonify(quote.to_dict())
