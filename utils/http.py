from flask import current_app, request

from utils.errors import ValidationError


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def int_arg(name: str, default=None):
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def bool_arg(name: str) -> bool:
    return (request.args.get(name) or "").strip().lower() == "true"


def set_session_cookie(response, token: str):
    cfg = current_app.config
    response.set_cookie(
        cfg["SESSION_TOKEN_COOKIE"],
        token,
        max_age=cfg["SESSION_TTL_HOURS"] * 3600,
        httponly=True,
        secure=not (cfg.get("DEBUG") or cfg.get("TESTING")),
        samesite="Lax",
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(current_app.config["SESSION_TOKEN_COOKIE"])
    return response
