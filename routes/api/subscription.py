# routes/api/subscription.py
import stripe
from flask import Blueprint, current_app

from auth.entitlements import get_entitlement, build_entitlement
from auth.guards import tier_gate
from core.extensions import csrf, limiter
from core.http_utils import _json_ok, _json_err, nocache
from domain.policies import Tier, TIER_CONFIG
from services.billing import fetch_stripe_subscription, sync_subscription, BillingNotConfigured

api_subscription_bp = Blueprint("api_subscription", __name__)


@csrf.exempt
@limiter.limit("30/minute")
@api_subscription_bp.route("/api/subscription/check", methods=["POST"])
def check_subscription():
    """
    Stripe 에서 구독 상태를 다시 가져와 로컬 row 동기화 후 최신 권한 반환
    """
    ctx = get_entitlement()
    if not ctx.authenticated:
        return _json_err("auth_required", "sign in to check subscription", 401)

    user = ctx.user
    try:
        snapshot = fetch_stripe_subscription(user.email)
    except BillingNotConfigured as e:
        current_app.logger.error(f"[BILLING] {e}")
        return _json_err("billing_unavailable", str(e), 503)
    except stripe.StripeError as e:
        current_app.logger.error(f"[BILLING] stripe error uid={user.user_id}: {e}")
        return _json_err(
            "billing_provider_error",
            "could not reach payment provider",
            502,
            tier=ctx.tier.value,
        )

    sync_subscription(user, snapshot)
    refreshed = build_entitlement(user)

    if snapshot is None:
        payload = {"subscribed": False, "tier": Tier.FREE.value, "product_id": None, "subscription_end": None}
    else:
        payload = snapshot.to_dict()
    return _json_ok({**payload, "entitlement": refreshed.to_dict()})


@csrf.exempt
@api_subscription_bp.route("/api/subscription", methods=["GET"])
@nocache
def current_subscription():
    ctx = get_entitlement()
    if not ctx.authenticated:
        return {"authenticated": False, "sign_in_required": True}, 200

    gates = {t.value: tier_gate(t, ctx) is None for t in Tier}
    return {**ctx.to_dict(), "access": gates}, 200


@api_subscription_bp.route("/api/tiers", methods=["GET"])
def list_tiers():
    return {
        "tiers": [
            {"tier": t.value, **TIER_CONFIG[t]}
            for t in Tier
        ]
    }, 200
