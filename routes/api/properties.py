from flask import Blueprint, g

from auth.guards import require_feature
from core.extensions import csrf, limiter
from core.http_utils import _json_err
from security.inputs import require_safe_input, property_lookup_schema, categorize_schema
from services.property_lookup import lookup_property
from utils.property_categories import group_properties, sorted_categories, COMMON_PROPERTY_SUGGESTIONS

api_properties_bp = Blueprint("api_properties", __name__)


@csrf.exempt
@limiter.limit("30/minute")
@api_properties_bp.route("/api/property/lookup", methods=["POST"])
@require_safe_input(property_lookup_schema, for_llm_fields=["material_name", "property_name"])
@require_feature("property_prediction")
def api_property_lookup():
    data = g.safe_input
    material_name = (data.get("material_name") or "").strip()
    property_name = (data.get("property_name") or "").strip()
    if not material_name or not property_name:
        return _json_err("fields_required", "Material name and property name are required", 400)

    return lookup_property(material_name, property_name), 200


@csrf.exempt
@api_properties_bp.route("/api/properties/categorize", methods=["POST"])
@require_safe_input(categorize_schema)
def api_categorize_properties():
    return {"categories": group_properties(g.safe_input.get("properties"))}, 200


@api_properties_bp.route("/api/properties/categories", methods=["GET"])
def api_property_categories():
    return {"categories": sorted_categories(), "suggestions": COMMON_PROPERTY_SUGGESTIONS}, 200
