# guards.py
from functools import wraps
from flask import jsonify, current_app, make_response
from sqlalchemy.exc import SQLAlchemyError

from auth.entitlements import get_entitlement
from auth.quota import record_search, limit_for, window_for
from domain.models import db
from domain.policies import Tier, FEATURES, TIER_CONFIG


def tier_gate(required, ctx):
    """
    접근 가능하면 None, 아니면 필요한 tier 의 가격/기능 안내 payload
    """
    required = Tier.parse(required)
    if ctx.has_feature_access(required):
        return None

    cfg = TIER_CONFIG[required]
    return {
        "error": "tier_required",
        "required_tier": required.value,
        "label": cfg["label"],
        "price": cfg["monthly_price"],
        "annual_price": cfg["annual_price"],
        "features": list(cfg["features"]),
        "current_tier": ctx.tier.value,
        "upgrade_url": current_app.config.get("PRICING_URL", "/pricing"),
    }


def require_tier(required):
    """tier 게이트: 비로그인 401, 권한 부족 403 + 업그레이드 안내"""
    required = Tier.parse(required)

    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            ctx = get_entitlement()
            if not ctx.authenticated and required != Tier.FREE:
                return jsonify({"error": "auth_required", "sign_in_required": True}), 401
            fallback = tier_gate(required, ctx)
            if fallback is not None:
                return jsonify(fallback), 403
            return f(*args, **kwargs)
        return wrapper
    return decorator


def require_feature(feature_key: str):
    if feature_key not in FEATURES:
        raise KeyError(f"Unknown feature '{feature_key}'")
    return require_tier(FEATURES[feature_key])


def enforce_quota(f):
    """
    검색 사용량 게이트 (성공 응답일 때만 +1)
      - free: daily / lite: monthly / premium: 제한 없음
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        ctx = get_entitlement()
        if not ctx.authenticated:
            return jsonify({"error": "auth_required", "sign_in_required": True}), 401

        window = window_for(ctx.tier)
        if not ctx.can_search:
            return jsonify({
                "error": f"{window}_limit_reached",
                "limit": limit_for(ctx.tier),
                "remaining": 0,
                "tier": ctx.tier.value,
            }), 429

        resp = make_response(f(*args, **kwargs))
        if resp.status_code >= 400 or window is None:
            return resp

        try:
            count = record_search(ctx.user.user_id, ctx.tier)
        except SQLAlchemyError as e:
            # 집계 실패해도 결과는 그대로 반환
            db.session.rollback()
            current_app.logger.error(f"[QUOTA] record failed uid={ctx.user.user_id} tier={ctx.tier.value}: {e}")
            return resp

        if window == "daily":
            ctx.daily_count = count
        else:
            ctx.monthly_count = count
        return resp
    return wrapper
