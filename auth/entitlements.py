from dataclasses import dataclass
from typing import Optional

from flask import g, session, current_app
from sqlalchemy.exc import SQLAlchemyError

from auth.quota import get_remaining, limit_for, window_for, load_usage
from domain.models import db, User, Subscription
from domain.policies import Tier, TIER_ACCESS, UNLIMITED


# 요청마다 load_entitlement() 를 한 번 호출해 g.entitlement 에 저장하고
# 뷰/가드에서는 get_entitlement() 로 꺼내 쓴다.


def resolve_tier(subscription) -> Tier:
    """구독 스냅샷 -> tier. 없거나 비활성/알 수 없는 값이면 free"""
    if subscription is None:
        return Tier.FREE
    if (getattr(subscription, "status", None) or "").lower() != "active":
        return Tier.FREE
    return Tier.parse(getattr(subscription, "tier", None))


def has_feature_access(tier, required) -> bool:
    return Tier.parse(tier) in TIER_ACCESS[Tier.parse(required)]


@dataclass
class EntitlementContext:
    user: Optional[User] = None
    subscription: Optional[Subscription] = None
    tier: Tier = Tier.FREE
    daily_count: int = 0
    monthly_count: int = 0

    @property
    def authenticated(self) -> bool:
        return self.user is not None

    @property
    def remaining(self):
        return get_remaining(self.tier, self.daily_count, self.monthly_count)

    @property
    def can_search(self) -> bool:
        return self.authenticated and self.remaining > 0

    def has_feature_access(self, required) -> bool:
        return has_feature_access(self.tier, required)

    def to_dict(self):
        if not self.authenticated:
            return {"authenticated": False, "sign_in_required": True}

        remaining = self.remaining
        limit = limit_for(self.tier)
        window = window_for(self.tier)
        if window == "daily":
            used = self.daily_count
        elif window == "monthly":
            used = self.monthly_count
        else:
            used = None
        return {
            "authenticated": True,
            "tier": self.tier.value,
            "window": window,
            "used": used,
            "limit": None if limit == UNLIMITED else limit,
            "remaining": None if remaining == UNLIMITED else remaining,
            "unlimited": remaining == UNLIMITED,
            "can_search": self.can_search,
            "subscription": self.subscription.to_dict() if self.subscription else None,
        }


def load_current_user() -> Optional[User]:
    sess = session.get("user") or {}
    uid = sess.get("user_id")
    if not uid:
        g.current_user = None
        return None

    # 조회 실패 시 비로그인으로 진행 (공개 라우트는 정상 응답)
    try:
        user = User.query.filter_by(user_id=uid).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(f"[ENTITLEMENT] user load failed uid={uid}: {e}")
        user = None
    g.current_user = user
    return user


def get_active_subscription(user_id) -> Optional[Subscription]:
    return Subscription.query.filter_by(user_id=user_id, status="active").first()


def build_entitlement(user: Optional[User], now=None) -> EntitlementContext:
    """
    DB 조회 실패 시에도 요청을 막지 않는다 (free, 사용량 0 으로 진행)
    """
    if user is None:
        return EntitlementContext()

    ctx = EntitlementContext(user=user)
    try:
        sub = get_active_subscription(user.user_id)
        ctx.subscription = sub
        ctx.tier = resolve_tier(sub)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(f"[ENTITLEMENT] subscription load failed uid={user.user_id}: {e}")

    try:
        ctx.daily_count, ctx.monthly_count = load_usage(user.user_id, now)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning(f"[ENTITLEMENT] usage load failed uid={user.user_id}: {e}")

    return ctx


def load_entitlement() -> EntitlementContext:
    user = load_current_user()
    ctx = build_entitlement(user)
    g.entitlement = ctx
    return ctx


def get_entitlement() -> EntitlementContext:
    ctx = getattr(g, "entitlement", None)
    if ctx is None:
        ctx = load_entitlement()
    return ctx
