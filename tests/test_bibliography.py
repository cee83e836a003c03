import services.bibliography as bibliography
import services.property_lookup as property_lookup
from services.bibliography import merge_results, normalize_title, search_bibliography


def _entry(title, year=None, citations=0, source="PubMed"):
    return {"title": title, "year": year, "citation_count": citations, "source_database": source}


def test_normalize_title_ignores_case_and_spacing():
    assert normalize_title("  Chitosan   Films ") == normalize_title("chitosan films")
    assert normalize_title(None) == ""


def test_merge_dedupes_first_wins_and_sorts():
    pubmed = [_entry("Chitosan films", 2020, 3), _entry("PLA blends", 2023, 1)]
    crossref = [_entry("CHITOSAN  films", 2024, 50, source="CrossRef"), _entry("PHA review", 2023, 9, "CrossRef")]

    merged = merge_results([pubmed, crossref, None])
    assert [e["title"] for e in merged] == ["PHA review", "PLA blends", "Chitosan films"]
    assert merged[-1]["source_database"] == "PubMed"


def test_search_combines_sources_and_truncates(app, monkeypatch):
    calls = {}

    def _pubmed(q, n):
        calls["pubmed"] = (q, n)
        return [_entry("A", 2021), _entry("B", 2022)]

    def _crossref(q, n):
        calls["crossref"] = (q, n)
        return [_entry("b", 2019), _entry("C", 2024)]

    monkeypatch.setattr(bibliography, "search_pubmed", _pubmed)
    monkeypatch.setattr(bibliography, "search_crossref", _crossref)
    monkeypatch.setattr(bibliography, "complete_json", lambda *a: {"entries": [{"title": "D", "year": 2025}]})

    result = search_bibliography("bioplastics", max_results=3)
    assert calls["pubmed"] == ("bioplastics materials", 2)
    assert calls["crossref"] == ("bioplastics materials science", 2)
    assert [e["title"] for e in result["entries"]] == ["D", "C", "B"]
    assert result["total_found"] == 4
    assert result["entries"][0]["source_database"] == "AI"


def test_search_survives_every_source_failing(app, monkeypatch):
    monkeypatch.setattr(bibliography, "search_pubmed", lambda q, n: [])
    monkeypatch.setattr(bibliography, "search_crossref", lambda q, n: [])
    monkeypatch.setattr(bibliography, "complete_json", lambda *a: None)

    result = search_bibliography("anything")
    assert result["entries"] == []
    assert result["total_found"] == 0
    assert "PubMed" in result["sources"]


def test_bibliography_route_for_lite_user(client, make_user, login, monkeypatch):
    monkeypatch.setattr(
        "routes.api.bibliography.search_bibliography",
        lambda q, **kw: {"entries": [], "sources": [], "total_found": 0},
    )
    user = make_user("r1", tier="researcher_lite")
    login(user)

    assert client.post("/api/bibliography/search", json={"query": " "}).status_code == 400
    resp = client.post("/api/bibliography/search", json={"query": "chitosan"})
    assert resp.status_code == 200
    assert resp.get_json()["success"] is True


def test_property_lookup_without_ai(app, monkeypatch):
    monkeypatch.setattr(property_lookup, "search_pubmed", lambda q, n: [{"title": "X", "authors": ["a", "b", "c", "d"]}])
    monkeypatch.setattr(property_lookup, "search_crossref", lambda q, n: [{"title": "x"}])
    monkeypatch.setattr(property_lookup, "complete_json", lambda *a: None)

    result = property_lookup.lookup_property("PLA", "Density")
    assert result["value"] is None
    assert result["confidence"] == "low"
    assert result["note"] == "AI service unavailable"
    assert len(result["sources"]) == 1
    assert result["sources"][0]["authors"] == ["a", "b", "c"]


def test_property_lookup_normalizes_confidence(app, monkeypatch):
    monkeypatch.setattr(property_lookup, "search_pubmed", lambda q, n: [])
    monkeypatch.setattr(property_lookup, "search_crossref", lambda q, n: [])
    monkeypatch.setattr(
        property_lookup, "complete_json",
        lambda *a: {"value": "1.24 g/cm3", "confidence": "certain", "note": "handbook"},
    )

    result = property_lookup.lookup_property("PLA", "Density")
    assert result["value"] == "1.24 g/cm3"
    assert result["confidence"] == "medium"


def test_property_lookup_route_requires_premium(client, make_user, login):
    user = make_user("r2", tier="industry_lite")
    login(user)
    resp = client.post("/api/property/lookup", json={"material_name": "PLA", "property_name": "Density"})
    assert resp.status_code == 403
    assert resp.get_json()["required_tier"] == "researcher_premium"
