from flask import current_app

from services.academic import search_pubmed, search_crossref
from services.ai.gateway import complete_json
from services.bibliography import dedupe_by_title

CONFIDENCE_LEVELS = ("high", "medium", "low")

PROPERTY_SYSTEM_PROMPT = """You are a materials science expert with access to scientific literature. Provide accurate, research-backed property values for materials.

Guidelines:
1. Only provide values that are well-established in scientific literature
2. Use standard units (SI preferred); for ranges use "X - Y units"
3. Note standard conditions when the property depends on them
4. Do NOT make up values - if uncertain, say the data is not available
{context}
Return ONLY a JSON object:
{{"value": "<value with units, or null>", "confidence": "<high|medium|low>", "note": "<source/method note>"}}"""


def _citation(entry):
    return {
        "title": entry.get("title"),
        "authors": (entry.get("authors") or [])[:3],
        "journal": entry.get("journal"),
        "year": entry.get("year"),
        "doi": entry.get("doi"),
        "url": entry.get("url"),
    }


def _source_context(sources):
    if not sources:
        return ""
    lines = [
        f'{i}. "{s.get("title")}" ({s.get("journal")}, {s.get("year")}) - DOI: {s.get("doi") or "N/A"}'
        for i, s in enumerate(sources[:5], start=1)
    ]
    return "\nRelevant research papers found:\n" + "\n".join(lines) + "\n"


def lookup_property(material_name: str, property_name: str):
    """
    학술 검색으로 근거 문헌을 모으고 AI 로 값 추출.
    AI 실패 시 value=None, confidence=low 로 응답 (에러 아님)
    """
    current_app.logger.info(f"[PROPERTY] lookup {property_name!r} for {material_name!r}")

    sources = dedupe_by_title(
        search_pubmed(f"{material_name} {property_name} properties characterization", 5)
        + search_crossref(f"{material_name} {property_name}", 5)
    )
    sources = [_citation(s) for s in sources]

    parsed = complete_json(
        PROPERTY_SYSTEM_PROMPT.format(context=_source_context(sources)),
        f"Material: {material_name}\nProperty: {property_name}\n\n"
        "Provide the most accurate value based on scientific literature.",
    )
    if not parsed:
        return {"value": None, "confidence": "low", "note": "AI service unavailable", "sources": sources[:3]}

    confidence = str(parsed.get("confidence") or "medium").lower()
    if confidence not in CONFIDENCE_LEVELS:
        confidence = "medium"

    result = {
        "value": parsed.get("value"),
        "confidence": confidence,
        "note": parsed.get("note"),
        "sources": sources[:3],
    }
    current_app.logger.info(f"[PROPERTY] result value={result['value']!r} confidence={confidence}")
    return result
