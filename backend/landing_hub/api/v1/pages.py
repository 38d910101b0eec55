# landing_hub/api/v1/pages.py
from flask import jsonify, request
from flask_jwt_extended import jwt_required

from landing_hub.application.access import coerce_user_id, is_admin_user
from landing_hub.application.analytics.record_event import record_conversion, record_view
from landing_hub.application.listing.list_pages import list_pages_for_owner, list_pages_for_partner
from landing_hub.application.pages.generate_page import generate_page
from landing_hub.application.pages.get_page import get_page, get_page_by_slug, page_stats_for_owner
from landing_hub.application.pages.lifecycle import change_status, restore_page, trash_page
from landing_hub.application.portals.branding import branding_payload
from landing_hub.domain.errors import ForbiddenError
from landing_hub.normalizers.page import normalize_page
from landing_hub.normalizers.pagination import normalize_pagination
from landing_hub.services import current_services
from landing_hub.utils.decorators import current_actor_id, roles_required, webhook_token_required
from landing_hub.utils.optimistic_lock import last_modified
from . import v1_bp


def _page_response(page, status=200):
    services = current_services()
    data = normalize_page(page, services.settings, admin=True)
    if page.portal is not None:
        data["branding"] = branding_payload(page, services)
    response = jsonify(data)
    response.headers["Last-Modified"] = last_modified(page)
    return response, status


def _list_response(items, meta):
    settings = current_services().settings
    return jsonify(normalize_pagination(
        items,
        lambda page: normalize_page(page, settings),
        meta=meta,
    ))


# ------------------------
# Generation
# ------------------------

@v1_bp.route("/pages", methods=["POST"])
@jwt_required()
@roles_required("admin", "loan_officer")
def create_page():
    actor_id = current_actor_id()
    data = request.get_json(silent=True) or {}

    loan_officer_ids = data.get("loan_officer_ids")
    if loan_officer_ids is None:
        loan_officer_ids = []
    if not isinstance(loan_officer_ids, list):
        return jsonify({"error": "loan_officer_ids must be an array."}), 400

    requested_owner = coerce_user_id(
        data.get("owner_id") or (loan_officer_ids[0] if loan_officer_ids else None) or actor_id
    )
    # Loan officers generate their own pages; admins generate for anyone
    if requested_owner != actor_id and not is_admin_user(actor_id):
        raise ForbiddenError("You can only generate pages you own.")

    page = generate_page(
        template_type=data.get("template_type"),
        owner_id=data.get("owner_id"),
        actor_id=actor_id,
        co_brand_partner_id=data.get("co_brand_partner_id"),
        property_data=data.get("property_data"),
        explicit_slug_seed=data.get("slug_seed"),
        company_name=data.get("company_name"),
        group_id=coerce_user_id(data.get("group_id")),
        loan_officer_ids=loan_officer_ids,
        partnership_id=coerce_user_id(data.get("partnership_id")),
    )
    return _page_response(page, 201)


@v1_bp.route("/pages/<page_id>", methods=["GET"])
@jwt_required()
def get_page_by_id(page_id):
    page = get_page(page_id=page_id, viewer_id=current_actor_id())
    return _page_response(page)


@v1_bp.route("/pages/by-slug/<template_type>/<slug>", methods=["GET"])
@jwt_required()
def get_page_by_path(template_type, slug):
    page = get_page_by_slug(template_type=template_type, slug=slug, viewer_id=current_actor_id())
    return _page_response(page)


# ------------------------
# Analytics
# ------------------------

@v1_bp.route("/pages/<page_id>/views", methods=["POST"])
def track_view(page_id):
    # Public: fired by every render of the landing page
    return jsonify({"page_id": page_id, "view_count": record_view(page_id)})


@v1_bp.route("/pages/<page_id>/conversions", methods=["POST"])
@webhook_token_required
def track_conversion(page_id):
    # Server-to-server: the lead capture service reports each lead once
    data = request.get_json(silent=True) or {}
    lead_id = data.get("lead_id")
    if not lead_id:
        return jsonify({"error": "lead_id is required"}), 400
    total = record_conversion(page_id, lead_id=lead_id)
    return jsonify({
        "page_id": page_id,
        "conversion_count": total,
        "counted": total is not None,
    })


# ------------------------
# Lifecycle
# ------------------------

@v1_bp.route("/pages/<page_id>/trash", methods=["POST"])
@jwt_required()
def trash(page_id):
    return _page_response(trash_page(page_id=page_id, actor_id=current_actor_id()))


@v1_bp.route("/pages/<page_id>/restore", methods=["POST"])
@jwt_required()
def restore(page_id):
    return _page_response(restore_page(page_id=page_id, actor_id=current_actor_id()))


@v1_bp.route("/pages/<page_id>/status", methods=["PUT"])
@jwt_required()
def update_status(page_id):
    data = request.get_json(silent=True) or {}
    status = data.get("status")
    if not status:
        return jsonify({"error": "status is required"}), 400
    page = change_status(page_id=page_id, actor_id=current_actor_id(), status=status)
    return _page_response(page)


# ------------------------
# Listings
# ------------------------

def _ensure_self_or_admin(user_id):
    actor_id = current_actor_id()
    if actor_id != user_id and not is_admin_user(actor_id):
        raise ForbiddenError("You can only list your own pages.")


@v1_bp.route("/pages/owner/<int:owner_id>", methods=["GET"])
@jwt_required()
def list_owner_pages(owner_id):
    _ensure_self_or_admin(owner_id)
    items, meta = list_pages_for_owner(
        owner_id=owner_id,
        page=request.args.get("page", 1),
        per_page=request.args.get("per_page"),
        template_type=request.args.get("template_type"),
    )
    return _list_response(items, meta)


@v1_bp.route("/pages/owner/<int:owner_id>/stats", methods=["GET"])
@jwt_required()
def owner_stats(owner_id):
    _ensure_self_or_admin(owner_id)
    return jsonify(page_stats_for_owner(owner_id))


@v1_bp.route("/pages/partner/<int:partner_id>", methods=["GET"])
@jwt_required()
def list_partner_pages(partner_id):
    _ensure_self_or_admin(partner_id)
    items, meta = list_pages_for_partner(
        partner_id=partner_id,
        page=request.args.get("page", 1),
        per_page=request.args.get("per_page"),
        template_type=request.args.get("template_type"),
    )
    return _list_response(items, meta)
