import hmac
from functools import wraps

from flask import current_app, jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity


def current_actor_id():
    """User id from the JWT, ``None`` for anonymous or malformed identities."""
    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError):
        return None


def roles_required(*allowed_roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return jsonify({"error": "Insufficient permissions"}), 403

            return fn(*args, **kwargs)
        return wrapper
    return decorator


def webhook_token_required(fn):
    """Shared-secret guard of the event webhooks (``X-Webhook-Token``)."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        expected = current_app.config.get("WEBHOOK_TOKEN") or ""
        provided = request.headers.get("X-Webhook-Token", "")

        if not expected or not hmac.compare_digest(expected, provided):
            return jsonify({"error": "Invalid webhook token"}), 403

        return fn(*args, **kwargs)
    return wrapper
