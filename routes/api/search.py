from flask import Blueprint, g

from auth.guards import enforce_quota, require_feature
from core.extensions import csrf, limiter
from core.http_utils import _json_err
from security.inputs import require_safe_input, search_schema
from services.material_search import search_materials

api_search_bp = Blueprint("api_search", __name__)


# 검색 1회 = 사용량 1 (성공 응답일 때만 집계)
@csrf.exempt
@limiter.limit("60/minute")
@api_search_bp.route("/api/search", methods=["POST"])
@require_safe_input(search_schema, for_llm_fields=["query"])
@require_feature("material_search")
@enforce_quota
def api_search():
    data = g.safe_input
    query = (data.get("query") or "").strip()
    if not query:
        return _json_err("query_required", "Query is required", 400)

    include_summary = data.get("include_ai_summary", True) is not False
    return search_materials(query, include_ai_summary=include_summary), 200
