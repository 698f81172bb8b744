# routes/admin.py
from flask import Blueprint, jsonify

from dao import (
    category as category_dao,
    delivery as delivery_dao,
    order as order_dao,
    quote as quote_dao,
    session as session_dao,
    stats as stats_dao,
    user as user_dao,
)
from db.models.user import UserRole
from utils.auth import current_identity, scope_guard
from utils.errors import NotFound, ValidationError
from utils.http import int_arg, json_body

admin_bp = scope_guard(Blueprint("admin_api", __name__, url_prefix="/api/admin"), UserRole.ADMIN)


# -------- categories --------
@admin_bp.route("/categories", methods=["POST"])
def categories_create():
    return jsonify(category_dao.create_category(json_body()).to_dict()), 201


@admin_bp.route("/categories/<int:category_id>", methods=["PUT"])
def categories_update(category_id: int):
    c = category_dao.update_category(category_id, json_body())
    if not c:
        raise NotFound("Category not found")
    return jsonify(c.to_dict())


@admin_bp.route("/categories/<int:category_id>", methods=["DELETE"])
def categories_delete(category_id: int):
    category_dao.delete_category(category_id)
    return "", 204


# -------- orders & quotes --------
@admin_bp.route("/orders")
def orders_list():
    orders = order_dao.list_orders(page=int_arg("page", 1), limit=int_arg("limit", 50))
    return jsonify([o.to_dict() for o in orders])


@admin_bp.route("/orders/<int:order_id>/status", methods=["PUT"])
def order_status(order_id: int):
    status = json_body().get("status")
    if not status:
        raise ValidationError("Invalid status")
    return jsonify(order_dao.update_order_status(order_id, status).to_dict())


@admin_bp.route("/orders/<int:order_id>", methods=["DELETE"])
def orders_delete(order_id: int):
    if not order_dao.delete_order(order_id):
        raise NotFound("Order not found")
    return "", 204


@admin_bp.route("/quotes/<int:quote_id>", methods=["DELETE"])
def quotes_delete(quote_id: int):
    if not quote_dao.delete_quote(quote_id):
        raise NotFound("Quote not found")
    return "", 204


@admin_bp.route("/quotes/<int:quote_id>/status", methods=["PUT"])
def quote_status(quote_id: int):
    quote = quote_dao.update_quote_status(
        current_identity(), quote_id, json_body().get("status")
    )
    return jsonify(quote.to_dict())


# -------- deliveries --------
@admin_bp.route("/deliveries", methods=["POST"])
def deliveries_create():
    return jsonify(delivery_dao.create_delivery(json_body()).to_dict()), 201


@admin_bp.route("/deliveries/<int:delivery_id>", methods=["PUT"])
def deliveries_update(delivery_id: int):
    d = delivery_dao.update_delivery(delivery_id, json_body())
    if not d:
        raise NotFound("Delivery not found")
    return jsonify(d.to_dict())


# -------- users & stats --------
@admin_bp.route("/users")
def users_list():
    users = user_dao.list_users(page=int_arg("page", 1), limit=int_arg("limit", 50))
    return jsonify([u.to_dict() for u in users])


@admin_bp.route("/users/<int:user_id>", methods=["PUT"])
def users_update(user_id: int):
    u = user_dao.update_user(user_id, **json_body())
    if not u:
        raise NotFound("User not found")
    return jsonify(u.to_dict())


@admin_bp.route("/users/<int:user_id>", methods=["DELETE"])
def users_delete(user_id: int):
    if not user_dao.delete_user(user_id):
        raise NotFound("User not found")
    return "", 204


@admin_bp.route("/stats")
def stats():
    return jsonify(stats_dao.admin_totals())


@admin_bp.route("/sessions/purge", methods=["POST"])
def sessions_purge():
    return jsonify({"purged": session_dao.purge_expired_sessions()})
