from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

import auth.guards as guards
import routes.api.search as search_routes
from auth.entitlements import EntitlementContext
from auth.guards import tier_gate, require_feature
from domain.models import db, DailyUsage, MonthlyUsage
from domain.policies import Tier
from utils.time_utils import day_key, month_key


def _stub_search(monkeypatch):
    monkeypatch.setattr(
        search_routes,
        "search_materials",
        lambda q, include_ai_summary=True: {"query": q, "results": [], "total_results": 0},
    )


def test_tier_gate_allows_and_denies(app):
    ctx = EntitlementContext(user=object(), tier=Tier.RESEARCHER_PREMIUM)
    assert tier_gate(Tier.RESEARCHER_LITE, ctx) is None

    fallback = tier_gate(Tier.INDUSTRY_LITE, ctx)
    assert fallback["error"] == "tier_required"
    assert fallback["required_tier"] == "industry_lite"
    assert fallback["label"] == "Industry Lite"
    assert fallback["price"] == 149
    assert fallback["current_tier"] == "researcher_premium"
    assert fallback["features"]


def test_search_requires_sign_in(client, monkeypatch):
    _stub_search(monkeypatch)
    resp = client.post("/api/search", json={"query": "PLA"})
    assert resp.status_code == 401
    assert resp.get_json()["sign_in_required"] is True


def test_free_search_counts_and_blocks_at_limit(client, make_user, login, monkeypatch):
    _stub_search(monkeypatch)
    user = make_user("free1")
    login(user)

    for i in range(5):
        resp = client.post("/api/search", json={"query": "PLA"})
        assert resp.status_code == 200, i

    row = DailyUsage.query.filter_by(user_id="free1", date=day_key()).one()
    assert row.search_count == 5

    resp = client.post("/api/search", json={"query": "PLA"})
    assert resp.status_code == 429
    body = resp.get_json()
    assert body["error"] == "daily_limit_reached"
    assert body["limit"] == 5
    db.session.refresh(row)
    assert row.search_count == 5


def test_failed_search_is_not_counted(client, make_user, login, monkeypatch):
    _stub_search(monkeypatch)
    user = make_user("free2")
    login(user)

    resp = client.post("/api/search", json={"query": "   "})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "query_required"
    assert DailyUsage.query.count() == 0


def test_lite_search_uses_monthly_counter(client, make_user, login, monkeypatch):
    _stub_search(monkeypatch)
    user = make_user("lite1", tier="researcher_lite")
    db.session.add(MonthlyUsage(user_id="lite1", month=month_key(), search_count=99))
    db.session.commit()
    login(user)

    assert client.post("/api/search", json={"query": "PHA"}).status_code == 200
    resp = client.post("/api/search", json={"query": "PHA"})
    assert resp.status_code == 429
    assert resp.get_json()["error"] == "monthly_limit_reached"
    assert DailyUsage.query.count() == 0


def test_premium_search_writes_no_usage(client, make_user, login, monkeypatch):
    _stub_search(monkeypatch)
    user = make_user("prem1", tier="industry_premium")
    login(user)

    for _ in range(7):
        assert client.post("/api/search", json={"query": "PBS"}).status_code == 200
    assert DailyUsage.query.count() == 0
    assert MonthlyUsage.query.count() == 0


def test_bibliography_gated_for_free_tier(client, make_user, login):
    user = make_user("free3")
    login(user)

    resp = client.post("/api/bibliography/search", json={"query": "chitosan"})
    assert resp.status_code == 403
    body = resp.get_json()
    assert body["required_tier"] == "researcher_lite"
    assert body["current_tier"] == "free"


def test_stale_usage_rows_do_not_count(client, make_user, login, monkeypatch):
    _stub_search(monkeypatch)
    user = make_user("free4")
    db.session.add(DailyUsage(user_id="free4", date=date(2000, 1, 1), search_count=5))
    db.session.commit()
    login(user)

    assert client.post("/api/search", json={"query": "PLA"}).status_code == 200


def test_usage_endpoint_anonymous_and_free(client, make_user, login, monkeypatch):
    body = client.get("/api/usage").get_json()
    assert body == {"authenticated": False, "sign_in_required": True}

    _stub_search(monkeypatch)
    user = make_user("free5")
    login(user)
    client.post("/api/search", json={"query": "PLA"})

    body = client.get("/api/usage").get_json()
    assert body["tier"] == "free"
    assert body["used"] == 1
    assert body["remaining"] == 4
    assert body["can_search"] is True


def test_record_failure_keeps_search_result(client, make_user, login, monkeypatch):
    _stub_search(monkeypatch)

    def _boom(user_id, tier):
        raise OperationalError("insert", {}, Exception("db down"))

    monkeypatch.setattr(guards, "record_search", _boom)
    user = make_user("free6")
    login(user)

    resp = client.post("/api/search", json={"query": "PLA"})
    assert resp.status_code == 200
    assert resp.get_json()["query"] == "PLA"
    assert DailyUsage.query.count() == 0


def test_unknown_feature_key_rejected():
    with pytest.raises(KeyError):
        require_feature("teleportation")
