# routes/auth.py
from flask import Blueprint, current_app, jsonify, make_response
from flask_login import current_user, login_required

from dao import session as session_dao, user as user_dao
from utils.auth import Identity, token_from_request
from utils.http import clear_session_cookie, json_body, set_session_cookie
from utils.validators import require_email

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _signed_in(user, status=200):
    identity = Identity(user_id=user.id, role=user.role)
    token = session_dao.create_session(identity)
    body = user.to_dict()
    body["token"] = token
    return set_session_cookie(make_response(jsonify(body), status), token)


@auth_bp.route("/register/client", methods=["POST"])
def register_client():
    user = user_dao.register_client(json_body())
    return _signed_in(user, 201)


@auth_bp.route("/register/supplier", methods=["POST"])
def register_supplier():
    user = user_dao.register_supplier(json_body())
    return _signed_in(user, 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_body()
    email = require_email(data)
    identity = session_dao.authenticate(email, data.get("password") or "")
    user = user_dao.get_user(identity.user_id)
    current_app.logger.info("login user=%s", user.id)
    return _signed_in(user)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    session_dao.destroy_session(token_from_request())
    return clear_session_cookie(make_response(jsonify({"message": "Logged out"}), 200))


@auth_bp.route("/user")
@login_required
def me():
    return jsonify(current_user.to_dict())


@auth_bp.route("/user/password", methods=["POST"])
@login_required
def change_password():
    user = user_dao.change_password(current_user.id, json_body().get("newPassword"))
    # every open session dies with the old password; the caller gets a fresh one
    session_dao.destroy_user_sessions(user.id)
    return _signed_in(user)
