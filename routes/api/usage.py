from flask import Blueprint

from auth.entitlements import get_entitlement
from core.extensions import csrf
from core.http_utils import nocache

api_usage_bp = Blueprint("api_usage", __name__)


@csrf.exempt
@api_usage_bp.route("/api/usage", methods=["GET"])
@nocache
def api_usage_status():
    """
    현재 요청의 권한/사용량 스냅샷
    - 비로그인: {"authenticated": false, "sign_in_required": true}
    - 로그인: tier, 집계 창(daily/monthly/None), used/limit/remaining
    """
    return get_entitlement().to_dict(), 200
