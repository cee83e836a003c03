# services/billing.py
"""
Stripe -> 로컬 subscriptions 동기화

Stripe 가 구독 상태의 원천이다. 이메일로 고객을 찾고, 활성 구독 1건의
상품 id 를 tier 로 매핑한 뒤 subscriptions row 를 upsert 한다.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import stripe
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from domain.models import db, Subscription
from domain.policies import Tier, PRODUCT_TO_TIER
from utils.time_utils import from_timestamp, utcnow, to_utc_naive


class BillingNotConfigured(RuntimeError):
    pass


@dataclass
class StripeSubscription:
    tier: Tier
    product_id: Optional[str]
    customer_id: str
    subscription_id: str
    billing_period: str
    current_period_start: Optional[datetime]
    current_period_end: Optional[datetime]

    def to_dict(self):
        return {
            "subscribed": True,
            "tier": self.tier.value,
            "product_id": self.product_id,
            "billing_period": self.billing_period,
            "subscription_end": self.current_period_end.isoformat() if self.current_period_end else None,
        }


def _field(obj, key):
    if obj is None:
        return None
    try:
        return obj[key]
    except (KeyError, TypeError, IndexError):
        return getattr(obj, key, None)


def _stripe_opts():
    cfg = current_app.config
    key = cfg.get("STRIPE_SECRET_KEY")
    if not key:
        raise BillingNotConfigured("STRIPE_SECRET_KEY is not set")
    return {"api_key": key, "stripe_version": cfg.get("STRIPE_API_VERSION")}


def tier_for_product(product_id) -> Tier:
    return PRODUCT_TO_TIER.get(product_id, Tier.FREE)


def fetch_stripe_subscription(email: str) -> Optional[StripeSubscription]:
    """
    email -> 활성 구독 스냅샷. 고객/활성 구독이 없으면 None.
    Stripe API 오류(stripe.StripeError)는 호출자에게 전파
    """
    opts = _stripe_opts()

    customers = stripe.Customer.list(email=email, limit=1, **opts)
    data = _field(customers, "data") or []
    if not data:
        current_app.logger.info(f"[BILLING] no stripe customer email={email}")
        return None
    customer_id = _field(data[0], "id")

    subs = stripe.Subscription.list(customer=customer_id, status="active", limit=1, **opts)
    sub_data = _field(subs, "data") or []
    if not sub_data:
        current_app.logger.info(f"[BILLING] no active subscription customer={customer_id}")
        return None

    sub = sub_data[0]
    items = _field(_field(sub, "items"), "data") or []
    item = items[0] if items else None
    price = _field(item, "price")
    product_id = _field(price, "product")
    if product_id is not None and not isinstance(product_id, str):
        product_id = _field(product_id, "id")

    interval = _field(_field(price, "recurring"), "interval")
    billing_period = "annual" if interval == "year" else "monthly"

    # 최신 API 버전은 기간 정보가 subscription item 에 있음
    period_start = _field(item, "current_period_start") or _field(sub, "current_period_start")
    period_end = _field(item, "current_period_end") or _field(sub, "current_period_end")

    snapshot = StripeSubscription(
        tier=tier_for_product(product_id),
        product_id=product_id,
        customer_id=customer_id,
        subscription_id=_field(sub, "id"),
        billing_period=billing_period,
        current_period_start=from_timestamp(period_start),
        current_period_end=from_timestamp(period_end),
    )
    current_app.logger.info(
        f"[BILLING] active subscription customer={customer_id} product={product_id} "
        f"tier={snapshot.tier.value} period={billing_period}"
    )
    return snapshot


def sync_subscription(user, snapshot: Optional[StripeSubscription]) -> Optional[Subscription]:
    """
    로컬 row upsert.
      - snapshot 있음: tier/기간/Stripe id 갱신 (없으면 생성)
      - snapshot 없음 + row 있음: free/active 로 되돌림
      - snapshot 없음 + row 없음: 아무것도 쓰지 않음 (free 는 row 없이 표현)
    DB 오류는 로그만 남기고 None 반환 (구독 확인 자체는 실패시키지 않음)
    """
    try:
        row = Subscription.query.filter_by(user_id=user.user_id).first()
        now = to_utc_naive(utcnow())

        if snapshot is not None:
            if row is None:
                row = Subscription(user_id=user.user_id, created_at=now)
                db.session.add(row)
            row.tier = snapshot.tier.value
            row.status = "active"
            row.billing_period = snapshot.billing_period
            row.stripe_customer_id = snapshot.customer_id
            row.stripe_subscription_id = snapshot.subscription_id
            row.current_period_start = snapshot.current_period_start
            row.current_period_end = snapshot.current_period_end
            row.updated_at = now
        elif row is not None:
            row.tier = Tier.FREE.value
            row.status = "active"
            row.stripe_subscription_id = None
            row.current_period_end = None
            row.updated_at = now

        db.session.commit()
        current_app.logger.info(
            f"[BILLING] synced uid={user.user_id} tier={row.tier if row is not None else Tier.FREE.value}"
        )
        return row
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"[BILLING] sync failed uid={user.user_id}: {e}")
        return None
