from datetime import datetime, timezone, date

from auth.quota import get_remaining, can_search, record_search, load_usage, window_for
from domain.models import db, DailyUsage, MonthlyUsage
from domain.policies import Tier, UNLIMITED


def _at(y, m, d, h=12):
    return datetime(y, m, d, h, tzinfo=timezone.utc)


def test_free_remaining_from_daily_count():
    assert get_remaining(Tier.FREE, daily_count=3) == 2
    assert get_remaining(Tier.FREE, daily_count=5) == 0
    assert get_remaining(Tier.FREE, daily_count=9) == 0
    assert not can_search(Tier.FREE, daily_count=5)
    assert can_search(Tier.FREE, daily_count=0)


def test_lite_remaining_ignores_daily_count():
    assert get_remaining(Tier.RESEARCHER_LITE, daily_count=50, monthly_count=99) == 1
    assert get_remaining(Tier.INDUSTRY_LITE, monthly_count=100) == 0


def test_premium_is_unbounded():
    for tier in (Tier.RESEARCHER_PREMIUM, Tier.INDUSTRY_PREMIUM):
        assert get_remaining(tier, daily_count=10_000, monthly_count=10_000) == UNLIMITED
        assert can_search(tier, 10_000, 10_000)
        assert window_for(tier) is None


def test_free_record_search_upserts_daily_row(app):
    now = _at(2026, 3, 14)
    assert record_search("u1", Tier.FREE, now=now) == 1
    assert record_search("u1", Tier.FREE, now=now) == 2

    rows = DailyUsage.query.filter_by(user_id="u1").all()
    assert len(rows) == 1
    assert rows[0].date == date(2026, 3, 14)
    assert rows[0].search_count == 2
    assert MonthlyUsage.query.count() == 0


def test_daily_window_rolls_over_at_utc_midnight(app):
    record_search("u1", Tier.FREE, now=_at(2026, 3, 14, 23))
    record_search("u1", Tier.FREE, now=_at(2026, 3, 15, 0))

    assert load_usage("u1", now=_at(2026, 3, 15))[0] == 1
    assert DailyUsage.query.filter_by(user_id="u1").count() == 2


def test_lite_ninety_ninth_to_hundredth_search(app):
    now = _at(2026, 5, 20)
    db.session.add(MonthlyUsage(user_id="u2", month=date(2026, 5, 1), search_count=99))
    db.session.commit()

    assert record_search("u2", Tier.RESEARCHER_LITE, now=now) == 100
    daily, monthly = load_usage("u2", now=now)
    assert (daily, monthly) == (0, 100)
    assert get_remaining(Tier.RESEARCHER_LITE, daily, monthly) == 0


def test_lite_keyed_by_first_of_month(app):
    record_search("u3", Tier.INDUSTRY_LITE, now=_at(2026, 1, 31))
    record_search("u3", Tier.INDUSTRY_LITE, now=_at(2026, 2, 1))

    months = sorted(r.month for r in MonthlyUsage.query.filter_by(user_id="u3"))
    assert months == [date(2026, 1, 1), date(2026, 2, 1)]
    assert DailyUsage.query.count() == 0


def test_premium_record_search_writes_nothing(app):
    assert record_search("u4", Tier.RESEARCHER_PREMIUM) is None
    assert DailyUsage.query.count() == 0
    assert MonthlyUsage.query.count() == 0


def test_counters_are_per_user(app):
    now = _at(2026, 3, 14)
    record_search("a", Tier.FREE, now=now)
    record_search("b", Tier.FREE, now=now)
    record_search("b", Tier.FREE, now=now)

    assert load_usage("a", now=now) == (1, 0)
    assert load_usage("b", now=now) == (2, 0)
