import requests

import services.academic as academic
from services.academic import search_materials_project


def test_materials_project_skipped_without_key(app, monkeypatch):
    def _fail(*a, **kw):
        raise AssertionError("no request expected")

    monkeypatch.setattr(academic, "_get_json", _fail)
    assert search_materials_project("C3H4O2") is None


def test_materials_project_maps_summary(app, monkeypatch):
    app.config["MATERIALS_PROJECT_API_KEY"] = "mp-key"
    calls = {}

    def _get_json(url, params=None, headers=None):
        calls.update(url=url, params=params, headers=headers)
        return {"data": [{
            "material_id": "mp-149",
            "formula_pretty": "Si",
            "band_gap": 0.6123,
            "density": 2.2857,
            "formation_energy_per_atom": 0.0,
            "symmetry": {"crystal_system": "Cubic", "symbol": "Fd-3m"},
        }]}

    monkeypatch.setattr(academic, "_get_json", _get_json)
    result = search_materials_project("(Si)2")

    assert calls["params"]["formula"] == "Si"
    assert calls["headers"]["X-API-KEY"] == "mp-key"
    assert result["name"] == "Materials Project"
    assert result["url"].endswith("/mp-149")
    assert result["properties"]["Band Gap"] == "0.612 eV"
    assert result["properties"]["Density"] == "2.286 g/cm³"
    assert result["properties"]["Formation Energy"] == "0.0000 eV/atom"
    assert result["properties"]["Space Group"] == "Fd-3m"
    assert "Energy Above Hull" not in result["properties"]


def test_materials_project_failure_is_empty(app, monkeypatch):
    app.config["MATERIALS_PROJECT_API_KEY"] = "mp-key"

    def _down(*a, **kw):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(academic, "_get_json", _down)
    assert search_materials_project("Si") is None
