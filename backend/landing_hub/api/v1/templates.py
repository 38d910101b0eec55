from flask import jsonify

from landing_hub.domain.templates import get_template, list_templates
from . import v1_bp


@v1_bp.route("/templates", methods=["GET"])
def list_page_templates():
    return jsonify([spec.to_dict() for spec in list_templates()])


@v1_bp.route("/templates/<template_type>", methods=["GET"])
def get_page_template(template_type):
    return jsonify(get_template(template_type).to_dict())
