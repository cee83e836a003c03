from flask import Blueprint, g

from auth.guards import require_feature
from core.extensions import csrf, limiter
from core.http_utils import _json_err
from security.inputs import require_safe_input, bibliography_schema
from services.bibliography import search_bibliography

api_bibliography_bp = Blueprint("api_bibliography", __name__)


@csrf.exempt
@limiter.limit("30/minute")
@api_bibliography_bp.route("/api/bibliography/search", methods=["POST"])
@require_safe_input(bibliography_schema, for_llm_fields=["query", "sources"])
@require_feature("bibliography_search")
def api_bibliography_search():
    data = g.safe_input
    query = (data.get("query") or "").strip()
    if not query:
        return _json_err("query_required", "Query is required", 400)

    result = search_bibliography(
        query,
        sources=data.get("sources") or [],
        max_results=int(data.get("max_results") or 10),
        include_ai=data.get("include_ai", True) is not False,
    )
    return {"success": True, **result}, 200
