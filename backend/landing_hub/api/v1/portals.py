# landing_hub/api/v1/portals.py
from flask import jsonify, request
from flask_jwt_extended import jwt_required

from landing_hub.application.access import coerce_user_id, ensure_can_manage
from landing_hub.application.listing.list_pages import list_pages_for_company
from landing_hub.application.portals.branding import (
    branding_payload,
    get_portal_branding,
    update_branding as apply_branding,
    upload_branding_asset,
)
from landing_hub.application.portals.members import (
    bulk_add_realtors,
    remove_realtor,
    set_loan_officers,
    update_portal as apply_portal_update,
)
from landing_hub.normalizers.page import normalize_page, normalize_portal
from landing_hub.normalizers.pagination import normalize_pagination
from landing_hub.services import current_services
from landing_hub.utils.decorators import current_actor_id
from landing_hub.utils.optimistic_lock import enforce_optimistic_lock, last_modified
from . import v1_bp


@v1_bp.route("/portals", methods=["GET"])
@jwt_required()
def list_portals():
    settings = current_services().settings
    items, meta = list_pages_for_company(
        company_id=coerce_user_id(request.args.get("company_id")),
        viewer_id=current_actor_id(),
        page=request.args.get("page", 1),
        per_page=request.args.get("per_page"),
    )
    return jsonify(normalize_pagination(
        items,
        lambda page: {**normalize_page(page, settings), "portal": normalize_portal(page.portal)},
        meta=meta,
    ))


@v1_bp.route("/portals/<page_id>", methods=["PUT"])
@jwt_required()
def update_portal(page_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be an object."}), 400

    changes = {}
    if "company_name" in data:
        changes["company_name"] = data["company_name"] or ""
    if "group_id" in data:
        changes["group_id"] = data["group_id"]

    page = apply_portal_update(page_id=page_id, actor_id=current_actor_id(), **changes)
    settings = current_services().settings
    return jsonify({**normalize_page(page, settings, admin=True), "portal": normalize_portal(page.portal)})


# ------------------------
# Branding
# ------------------------

@v1_bp.route("/portals/<page_id>/branding", methods=["GET"])
@jwt_required()
def get_branding(page_id):
    branding = get_portal_branding(page_id=page_id, viewer_id=current_actor_id())
    return jsonify(branding.to_dict())


@v1_bp.route("/portals/<page_id>/branding", methods=["PUT"])
@jwt_required()
def update_branding(page_id):
    actor_id = current_actor_id()
    page = ensure_can_manage(page_id, actor_id)

    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(page)

    data = request.get_json(silent=True) or {}
    page = apply_branding(page_id=page_id, actor_id=actor_id, overrides=data)
    response = jsonify(branding_payload(page))
    response.headers["Last-Modified"] = last_modified(page)
    return response


@v1_bp.route("/portals/<page_id>/branding/assets", methods=["POST"])
@jwt_required()
def upload_asset(page_id):
    kind = request.form.get("kind") or request.args.get("kind", "logo")
    file = request.files.get("file")
    if file is None:
        return jsonify({"error": "file is required"}), 400

    page = upload_branding_asset(
        page_id=page_id,
        actor_id=current_actor_id(),
        kind=kind,
        file=file,
    )
    return jsonify(branding_payload(page)), 201


# ------------------------
# Members
# ------------------------

@v1_bp.route("/portals/<page_id>/loan-officers", methods=["PUT"])
@jwt_required()
def replace_loan_officers(page_id):
    data = request.get_json(silent=True) or {}
    page = set_loan_officers(
        page_id=page_id,
        actor_id=current_actor_id(),
        loan_officer_ids=data.get("loan_officer_ids") or [],
    )
    return jsonify(normalize_portal(page.portal))


@v1_bp.route("/portals/<page_id>/realtors", methods=["POST"])
@jwt_required()
def add_realtors(page_id):
    data = request.get_json(silent=True) or {}
    realtors = data.get("realtors")
    if not isinstance(realtors, list):
        return jsonify({"error": "Realtors must be an array."}), 400

    results = bulk_add_realtors(
        page_id=page_id,
        actor_id=current_actor_id(),
        realtors=realtors,
    )
    return jsonify({
        "data": results,
        "message": (
            f"Bulk upload complete. Created: {results['created']}, "
            f"Updated: {results['updated']}, Skipped: {results['skipped']}"
        ),
    })


@v1_bp.route("/portals/<page_id>/realtors/<int:user_id>", methods=["DELETE"])
@jwt_required()
def delete_realtor(page_id, user_id):
    include_group = request.args.get("include_group", "").lower() in ("1", "true", "yes")
    page = remove_realtor(
        page_id=page_id,
        actor_id=current_actor_id(),
        user_id=user_id,
        include_group=include_group,
    )
    return jsonify(normalize_portal(page.portal))
