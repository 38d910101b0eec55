# landing_hub/api/v1/events.py
from flask import jsonify, request

from landing_hub.application.access import coerce_user_id
from landing_hub.domain.events import LeadCaptured, ProfileImageChanged, publish
from landing_hub.utils.decorators import webhook_token_required
from . import v1_bp


def _results(responses):
    return [result for _, result in responses]


@v1_bp.route("/events/lead-captured", methods=["POST"])
@webhook_token_required
def lead_captured():
    data = request.get_json(silent=True) or {}
    page_id = data.get("page_id")
    lead_id = data.get("lead_id")
    if not page_id or not lead_id:
        return jsonify({"error": "page_id and lead_id are required"}), 400

    results = _results(publish(LeadCaptured(
        page_id=str(page_id),
        lead_id=str(lead_id),
        lead_data=data.get("lead_data") or {},
    )))
    total = results[0] if results else None
    return jsonify({
        "page_id": page_id,
        "conversion_count": total,
        "counted": total is not None,
    }), 202


@v1_bp.route("/events/profile-image-changed", methods=["POST"])
@webhook_token_required
def profile_image_changed():
    data = request.get_json(silent=True) or {}
    user_id = coerce_user_id(data.get("user_id"))
    if user_id is None:
        return jsonify({"error": "user_id is required"}), 400

    results = _results(publish(ProfileImageChanged(
        user_id=user_id,
        headshot_ref=data.get("headshot_ref") or None,
    )))
    return jsonify({"user_id": user_id, "pages_updated": sum(results)}), 202
