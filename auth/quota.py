# auth/quota.py
"""
검색 사용량 집계
  - free: 일간 (DailyUsage, UTC 날짜)
  - lite: 월간 (MonthlyUsage, UTC 기준 해당 월 1일)
  - premium: 집계 없음 (무제한)

증가는 INSERT ... ON CONFLICT DO UPDATE 한 문장으로 처리한다.
멱등키가 없으므로 호출자가 재시도하면 중복 집계될 수 있다.
한도 확인은 요청 시작 시 읽은 값으로 하므로 동시 요청이 한도를 조금 넘길 수 있다
(예: count 4 에서 동시 2건 -> 6). 증가 자체는 원자적이라 누락은 없다.
"""
from flask import current_app
from sqlalchemy.dialects import postgresql, sqlite

from domain.models import db, DailyUsage, MonthlyUsage
from domain.policies import (
    Tier,
    LITE_TIERS,
    PREMIUM_TIERS,
    FREE_DAILY_LIMIT,
    LITE_MONTHLY_LIMIT,
    UNLIMITED,
)
from utils.time_utils import day_key, month_key


def get_remaining(tier, daily_count=0, monthly_count=0):
    tier = Tier.parse(tier)
    if tier in PREMIUM_TIERS:
        return UNLIMITED
    if tier in LITE_TIERS:
        return max(0, LITE_MONTHLY_LIMIT - int(monthly_count or 0))
    return max(0, FREE_DAILY_LIMIT - int(daily_count or 0))


def can_search(tier, daily_count=0, monthly_count=0) -> bool:
    return get_remaining(tier, daily_count, monthly_count) > 0


def limit_for(tier):
    tier = Tier.parse(tier)
    if tier in PREMIUM_TIERS:
        return UNLIMITED
    if tier in LITE_TIERS:
        return LITE_MONTHLY_LIMIT
    return FREE_DAILY_LIMIT


def window_for(tier):
    """tier 가 참조하는 집계 창: "daily" | "monthly" | None"""
    tier = Tier.parse(tier)
    if tier in PREMIUM_TIERS:
        return None
    if tier in LITE_TIERS:
        return "monthly"
    return "daily"


def load_usage(user_id, now=None):
    """(오늘 daily 카운트, 이번 달 monthly 카운트). row 없으면 0"""
    daily = (
        db.session.query(DailyUsage.search_count)
        .filter(DailyUsage.user_id == user_id, DailyUsage.date == day_key(now))
        .scalar()
    )
    monthly = (
        db.session.query(MonthlyUsage.search_count)
        .filter(MonthlyUsage.user_id == user_id, MonthlyUsage.month == month_key(now))
        .scalar()
    )
    return int(daily or 0), int(monthly or 0)


def _insert_for_dialect(model):
    name = db.engine.dialect.name
    if name == "postgresql":
        return postgresql.insert(model)
    if name == "sqlite":
        return sqlite.insert(model)
    raise RuntimeError(f"atomic usage increment not supported on dialect '{name}'")


def _increment(model, key_column, key_value, user_id):
    table = model.__table__
    stmt = _insert_for_dialect(model).values(
        user_id=user_id,
        **{key_column: key_value},
        search_count=1,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.user_id, table.c[key_column]],
        set_={"search_count": table.c.search_count + 1},
    ).returning(table.c.search_count)

    count = db.session.execute(stmt).scalar_one()
    db.session.commit()
    return int(count)


def record_search(user_id, tier, now=None):
    """
    검색 1회 기록. 새 카운트를 반환 (premium 은 기록 없이 None)
    """
    window = window_for(tier)
    if window is None:
        return None

    if window == "daily":
        count = _increment(DailyUsage, "date", day_key(now), user_id)
    else:
        count = _increment(MonthlyUsage, "month", month_key(now), user_id)

    current_app.logger.info(
        f"[QUOTA] record_search uid={user_id} tier={Tier.parse(tier).value} window={window} count={count}"
    )
    return count
