# services/material_search.py
from flask import current_app

from services.academic import search_pubchem, search_materials_project
from services.ai.gateway import complete_json
from utils.property_categories import categorize_property

MAX_EXPANDED_TERMS = 15
# PubChem 은 확장어 앞쪽 일부만 조회
MAX_PUBCHEM_LOOKUPS = 5

EXPAND_SYSTEM_PROMPT = """You are a materials science expert. Given a search query about materials, expand it into specific material names that should be searched.

For category queries like "bioplastics", return specific materials in that category (e.g., PLA, PHA, PBS, PBAT, PCL).
For specific materials, return the material name plus common abbreviations and synonyms.
For property queries like "biodegradable plastics", return materials with that property.

Return ONLY a JSON object {"terms": [...]} with at most 15 strings."""

SUMMARY_SYSTEM_PROMPT = """You are a materials science expert. Generate a concise 2-3 sentence summary of the material and list common synonyms/abbreviations.
Return ONLY a JSON object: {"summary": "...", "synonyms": ["...", "..."]}"""

SAFETY_SYSTEM_PROMPT = """You are an occupational safety expert. Given a material name, provide brief, factual safety information. Return ONLY a JSON object with these fields (omit fields if unknown or not applicable):
{"hazard_class": "GHS hazard classification", "health_effects": "brief health hazard summary (max 100 chars)", "ppe": "recommended PPE (max 80 chars)", "cas_number": "CAS registry number if known"}
Be concise and factual. Only include fields you're confident about."""

REGULATIONS_SYSTEM_PROMPT = """You are a materials science regulatory expert. Given a material name, category, and applications, determine which regulatory standards and certifications are LIKELY applicable.

Common regulations to consider:
- Food Contact: FDA 21 CFR, EU 10/2011, GRAS status
- Packaging: ASTM D6400 (compostability), EN 13432 (EU composting)
- Environmental: REACH, RoHS, California Prop 65
- Medical/Biocompatible: ISO 10993, USP Class VI
- Biodegradability: ISO 14855, ASTM D5338
- Bio-based: USDA BioPreferred, OK Biobased, TUV Austria

Return ONLY a JSON object {"regulations": [...]} with at most 6 regulation names that are genuinely relevant to the material type."""

# AI 응답 필드 -> 속성 이름
SAFETY_FIELDS = (
    ("hazard_class", "Hazard Classification"),
    ("health_effects", "Health Effects"),
    ("ppe", "Recommended PPE"),
    ("cas_number", "CAS Number"),
)
MAX_REGULATIONS = 6


def expand_query(query: str):
    """원본 질의를 맨 앞에 두고 AI 확장어를 중복 없이 덧붙인다. 실패 시 [query]"""
    parsed = complete_json(
        EXPAND_SYSTEM_PROMPT,
        f'Expand this material search query into specific searchable terms: "{query}"',
    )
    terms = [query]
    seen = {query.lower()}
    for term in (parsed or {}).get("terms") or []:
        if len(terms) >= MAX_EXPANDED_TERMS:
            break
        if not isinstance(term, str):
            continue
        t = term.strip()
        if t and t.lower() not in seen:
            seen.add(t.lower())
            terms.append(t)
    return terms


def summarize_material(name: str):
    parsed = complete_json(SUMMARY_SYSTEM_PROMPT, f"Material: {name}")
    if not parsed:
        return "", []
    synonyms = [s for s in (parsed.get("synonyms") or []) if isinstance(s, str)]
    return parsed.get("summary") or "", synonyms


def safety_info(name: str):
    """AI 안전 정보 -> {"name": "Safety Analysis", "properties": {...}} 또는 None"""
    parsed = complete_json(SAFETY_SYSTEM_PROMPT, f"Safety information for: {name}")
    if not parsed:
        return None
    properties = {label: str(parsed[key]) for key, label in SAFETY_FIELDS if parsed.get(key)}
    if not properties:
        return None
    return {"name": "Safety Analysis", "properties": properties}


def generate_regulations(name: str, category: str = "", applications=()):
    parsed = complete_json(
        REGULATIONS_SYSTEM_PROMPT,
        f"Material: {name}\nCategory: {category or 'unknown'}\n"
        f"Applications: {', '.join(applications) or 'General use'}\n\n"
        "What regulatory standards likely apply to this material?",
    )
    names = [r.strip() for r in (parsed or {}).get("regulations") or [] if isinstance(r, str) and r.strip()]
    return [{"name": r, "source": "AI Analysis"} for r in names[:MAX_REGULATIONS]]


def _properties_from(source):
    return [
        {
            "name": name,
            "value": value,
            "category": categorize_property(name),
            "source": source["name"],
            "source_url": source.get("url"),
        }
        for name, value in source["properties"].items()
    ]


def _material_result(term, pubchem, include_ai_summary):
    """PubChem 을 기준으로 Materials Project, AI 안전 정보를 덧붙인다. 같은 속성은 먼저 온 값 우선"""
    found = [pubchem, search_materials_project(pubchem.get("formula")), safety_info(term)]
    found = [s for s in found if s]

    properties = []
    seen = set()
    for source in found:
        for prop in _properties_from(source):
            key = prop["name"].lower()
            if key in seen:
                continue
            seen.add(key)
            properties.append(prop)
    sources = [s["name"] for s in found]

    summary, synonyms = "", []
    if include_ai_summary:
        summary, synonyms = summarize_material(term)
        if summary:
            sources.append("AI Analysis")

    regulations = generate_regulations(term)
    if regulations and "AI Analysis" not in sources:
        sources.append("AI Analysis")

    return {
        "name": term,
        "iupac_name": pubchem["properties"].get("IUPAC Name"),
        "synonyms": synonyms,
        "chemical_formula": pubchem.get("formula"),
        "properties": properties,
        "regulations": regulations,
        "ai_summary": summary,
        "sources_used": sources,
    }


def search_materials(query: str, include_ai_summary: bool = True):
    """
    질의 확장 + 확장어별 PubChem / Materials Project 속성 + AI 안전 정보, 규제, 요약.
    외부 소스가 모두 실패해도 빈 결과로 정상 응답
    """
    current_app.logger.info(f"[SEARCH] material search q={query!r}")
    expanded = expand_query(query)
    results = []
    sources_used = []

    for term in expanded[:MAX_PUBCHEM_LOOKUPS]:
        pubchem = search_pubchem(term)
        if not pubchem:
            continue
        result = _material_result(term, pubchem, include_ai_summary)
        results.append(result)
        for source in result["sources_used"]:
            if source not in sources_used:
                sources_used.append(source)

    current_app.logger.info(f"[SEARCH] returning {len(results)} results from {len(sources_used)} sources")
    return {
        "query": query,
        "expanded_terms": expanded,
        "results": results,
        "total_results": len(results),
        "sources_used": sources_used,
    }
