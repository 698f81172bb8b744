# routes/client.py
from flask import Blueprint, jsonify

from dao import (
    delivery as delivery_dao,
    favorite as favorite_dao,
    order as order_dao,
    quote as quote_dao,
    user as user_dao,
)
from db.models.user import UserRole
from utils.auth import current_identity, scope_guard
from utils.errors import NotFound
from utils.http import json_body
from utils.validators import parse_int

client_bp = scope_guard(Blueprint("client_api", __name__, url_prefix="/api/client"), UserRole.CLIENT)


def _client():
    return user_dao.require_client(current_identity())


# -------- orders --------
@client_bp.route("/orders")
def orders_list():
    orders = order_dao.list_orders_by_client(_client().id)
    return jsonify([o.to_dict() for o in orders])


@client_bp.route("/orders", methods=["POST"])
def orders_create():
    client = _client()
    data = json_body()
    order = order_dao.create_order(client.id, data.get("lines"))
    return jsonify(order.to_dict(include_lines=True)), 201


@client_bp.route("/orders/<int:order_id>")
def order_detail(order_id: int):
    order = order_dao.get_order_for(current_identity(), order_id)
    return jsonify(order.to_dict(include_lines=True))


@client_bp.route("/orders/<int:order_id>/delivery")
def order_delivery(order_id: int):
    order = order_dao.get_order_for(current_identity(), order_id)
    d = delivery_dao.get_delivery_by_order(order.id)
    if not d:
        raise NotFound("Delivery not found")
    return jsonify(d.to_dict())


# -------- quotes --------
@client_bp.route("/quotes")
def quotes_list():
    quotes = quote_dao.list_quotes_by_client(_client().id)
    return jsonify([q.to_dict() for q in quotes])


@client_bp.route("/quotes", methods=["POST"])
def quotes_create():
    client = _client()
    data = json_body()
    supplier_id = data.get("supplierId")
    quote = quote_dao.create_quote(
        client.id,
        data.get("lines"),
        supplier_id=parse_int(supplier_id, "supplierId") if supplier_id is not None else None,
        valid_until=data.get("validUntil"),
    )
    return jsonify(quote.to_dict(include_lines=True)), 201


@client_bp.route("/quotes/<int:quote_id>")
def quote_detail(quote_id: int):
    quote = quote_dao.get_quote_for(current_identity(), quote_id)
    return jsonify(quote.to_dict(include_lines=True))


@client_bp.route("/quotes/<int:quote_id>/status", methods=["PATCH"])
def quote_status(quote_id: int):
    quote = quote_dao.update_quote_status(
        current_identity(), quote_id, json_body().get("status")
    )
    return jsonify(quote.to_dict())


# -------- favorites --------
@client_bp.route("/favorites")
def favorites_list():
    favorites = favorite_dao.list_favorites_by_client(_client().id)
    return jsonify([f.to_dict() for f in favorites])


@client_bp.route("/favorites", methods=["POST"])
def favorites_add():
    fav = favorite_dao.add_favorite(_client().id, json_body().get("productId"))
    return jsonify(fav.to_dict()), 201


@client_bp.route("/favorites/<int:product_id>", methods=["DELETE"])
def favorites_remove(product_id: int):
    favorite_dao.remove_favorite(_client().id, product_id)
    return "", 204


# -------- profile --------
@client_bp.route("/profile")
def profile():
    return jsonify(_client().to_dict())


@client_bp.route("/profile", methods=["PUT"])
def profile_update():
    client = user_dao.update_client(_client().id, json_body())
    return jsonify(client.to_dict())
