# services/academic.py
"""
학술 및 소재 메타데이터 API (PubMed E-utilities, CrossRef, PubChem, Materials Project)
실패는 로그 후 빈 결과. 재시도 없음.
"""
import re
from urllib.parse import quote
from datetime import datetime

import requests
from flask import current_app

_TAG_RE = re.compile(r"<[^>]*>")


def _get_json(url, params=None, headers=None):
    cfg = current_app.config
    r = requests.get(url, params=params, headers=headers, timeout=cfg.get("ACADEMIC_TIMEOUT", 10))
    r.raise_for_status()
    return r.json()


def _parse_year(value):
    try:
        return int(str(value).split(" ")[0][:4])
    except (TypeError, ValueError):
        return None


def search_pubmed(query: str, max_results: int = 5):
    cfg = current_app.config
    base = cfg.get("PUBMED_API_BASE")
    try:
        found = _get_json(
            f"{base}/esearch.fcgi",
            params={"db": "pubmed", "term": query, "retmax": max_results, "retmode": "json"},
        )
        ids = (found.get("esearchresult") or {}).get("idlist") or []
        if not ids:
            current_app.logger.info(f"[ACADEMIC] pubmed no results q={query!r}")
            return []

        summary = _get_json(
            f"{base}/esummary.fcgi",
            params={"db": "pubmed", "id": ",".join(ids), "retmode": "json"},
        )
    except (requests.RequestException, ValueError) as e:
        current_app.logger.warning(f"[ACADEMIC] pubmed failed q={query!r}: {e}")
        return []

    result = summary.get("result") or {}
    entries = []
    for pmid in ids:
        article = result.get(pmid)
        if not article:
            continue
        entries.append({
            "title": article.get("title") or "Untitled",
            "authors": [a.get("name") for a in (article.get("authors") or []) if a.get("name")],
            "abstract": article.get("sorttitle") or "",
            "journal": article.get("fulljournalname") or article.get("source") or "",
            "year": _parse_year(article.get("pubdate")) or datetime.utcnow().year,
            "doi": (article.get("elocationid") or "").replace("doi: ", ""),
            "url": f"https://pubmed.ncbi.nlm.nih.gov/{pmid}/",
            "source_database": "PubMed",
            "keywords": [],
            "citation_count": 0,
            "material_relevance": "Found via PubMed database search",
        })

    current_app.logger.info(f"[ACADEMIC] pubmed returned {len(entries)} entries")
    return entries


def search_crossref(query: str, max_results: int = 5):
    cfg = current_app.config
    try:
        data = _get_json(
            f"{cfg.get('CROSSREF_API_BASE')}/works",
            params={"query": query, "rows": max_results, "filter": "type:journal-article"},
            headers={"User-Agent": f"MaterialInk/1.0 (mailto:{cfg.get('CROSSREF_MAILTO')})"},
        )
    except (requests.RequestException, ValueError) as e:
        current_app.logger.warning(f"[ACADEMIC] crossref failed q={query!r}: {e}")
        return []

    items = (data.get("message") or {}).get("items") or []
    entries = []
    for item in items:
        date_parts = ((item.get("published") or item.get("created") or {}).get("date-parts") or [[None]])
        doi = item.get("DOI") or ""
        entries.append({
            "title": (item.get("title") or ["Untitled"])[0],
            "authors": [
                f"{a.get('given', '')} {a.get('family', '')}".strip()
                for a in (item.get("author") or [])
            ],
            "abstract": _TAG_RE.sub("", item.get("abstract") or ""),
            "journal": (item.get("container-title") or [""])[0],
            "year": _parse_year(date_parts[0][0]) if date_parts and date_parts[0] else None,
            "doi": doi,
            "url": item.get("URL") or (f"https://doi.org/{doi}" if doi else ""),
            "source_database": "CrossRef",
            "keywords": item.get("subject") or [],
            "citation_count": item.get("is-referenced-by-count") or 0,
            "material_relevance": "Found via CrossRef academic database",
        })

    current_app.logger.info(f"[ACADEMIC] crossref returned {len(entries)} entries")
    return entries


PUBCHEM_PROPERTIES = (
    "MolecularFormula,MolecularWeight,IUPACName,XLogP,TPSA,Complexity,"
    "HBondDonorCount,HBondAcceptorCount,ExactMass"
)


def search_pubchem(name: str):
    """
    화합물 이름 -> {"name", "properties": {...}, "formula", "url"} 또는 None
    """
    cfg = current_app.config
    url = f"{cfg.get('PUBCHEM_API_BASE')}/compound/name/{quote(name, safe='')}/property/{PUBCHEM_PROPERTIES}/JSON"
    try:
        r = requests.get(url, timeout=cfg.get("ACADEMIC_TIMEOUT", 10))
        if r.status_code == 404:
            current_app.logger.info(f"[ACADEMIC] pubchem not found name={name!r}")
            return None
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        current_app.logger.warning(f"[ACADEMIC] pubchem failed name={name!r}: {e}")
        return None

    rows = (data.get("PropertyTable") or {}).get("Properties") or []
    if not rows:
        return None
    props = rows[0]

    properties = {}
    if props.get("MolecularWeight"):
        properties["Molecular Weight"] = f"{props['MolecularWeight']} g/mol"
    if props.get("IUPACName"):
        properties["IUPAC Name"] = props["IUPACName"]
    if props.get("XLogP") is not None:
        properties["XLogP (Lipophilicity)"] = str(props["XLogP"])
    if props.get("TPSA"):
        properties["Topological Polar Surface Area"] = f"{props['TPSA']} Å²"
    if props.get("Complexity"):
        properties["Molecular Complexity"] = str(props["Complexity"])
    if props.get("HBondDonorCount") is not None:
        properties["H-Bond Donors"] = str(props["HBondDonorCount"])
    if props.get("HBondAcceptorCount") is not None:
        properties["H-Bond Acceptors"] = str(props["HBondAcceptorCount"])
    if props.get("ExactMass"):
        properties["Exact Mass"] = f"{props['ExactMass']} g/mol"

    return {
        "name": "PubChem",
        "properties": properties,
        "formula": props.get("MolecularFormula"),
        "url": f"https://pubchem.ncbi.nlm.nih.gov/compound/{props.get('CID')}",
    }


MATERIALS_PROJECT_FIELDS = (
    "material_id,formula_pretty,symmetry,band_gap,density,volume,"
    "formation_energy_per_atom,energy_above_hull"
)
_DIGITS_PARENS = re.compile(r"[()\d]")


def search_materials_project(formula: str):
    """
    화학식 -> Materials Project 요약 (밴드갭, 밀도, 형성 에너지 등) 또는 None
    API 키가 없으면 호출하지 않는다
    """
    cfg = current_app.config
    api_key = cfg.get("MATERIALS_PROJECT_API_KEY")
    if not api_key or not formula:
        return None

    # 원소 기호만 남긴다 (C3H4O2 -> CHO)
    clean = _DIGITS_PARENS.sub("", formula)
    try:
        data = _get_json(
            f"{cfg.get('MATERIALS_PROJECT_API_BASE')}/materials/summary/",
            params={"formula": clean, "_fields": MATERIALS_PROJECT_FIELDS, "_limit": 5},
            headers={"X-API-KEY": api_key, "Accept": "application/json"},
        )
    except (requests.RequestException, ValueError) as e:
        current_app.logger.warning(f"[ACADEMIC] materials project failed formula={formula!r}: {e}")
        return None

    rows = data.get("data") or []
    if not rows:
        current_app.logger.info(f"[ACADEMIC] materials project no results formula={clean!r}")
        return None
    m = rows[0]
    symmetry = m.get("symmetry") or {}

    properties = {}
    if m.get("density"):
        properties["Density"] = f"{m['density']:.3f} g/cm³"
    if m.get("band_gap") is not None:
        properties["Band Gap"] = f"{m['band_gap']:.3f} eV"
    if m.get("formation_energy_per_atom") is not None:
        properties["Formation Energy"] = f"{m['formation_energy_per_atom']:.4f} eV/atom"
    if m.get("energy_above_hull") is not None:
        properties["Energy Above Hull"] = f"{m['energy_above_hull']:.4f} eV/atom"
    if m.get("volume"):
        properties["Unit Cell Volume"] = f"{m['volume']:.3f} Å³"
    if symmetry.get("crystal_system"):
        properties["Crystal System"] = symmetry["crystal_system"]
    if symmetry.get("symbol"):
        properties["Space Group"] = symmetry["symbol"]

    current_app.logger.info(f"[ACADEMIC] materials project found id={m.get('material_id')}")
    return {
        "name": "Materials Project",
        "properties": properties,
        "formula": m.get("formula_pretty"),
        "url": f"https://next-gen.materialsproject.org/materials/{m.get('material_id')}",
    }
