# services/bibliography.py
import math

from flask import current_app

from services.academic import search_pubmed, search_crossref
from services.ai.gateway import complete_json

ACADEMIC_SOURCES = [
    "PubMed",
    "ResearchGate",
    "Scopus",
    "MDPI",
    "Wiley",
    "Springer",
    "ScienceDirect",
    "Nature",
    "ACS Publications",
    "IOP Science",
    "Taylor & Francis",
    "arXiv",
    "Google Scholar",
]

BIBLIOGRAPHY_SYSTEM_PROMPT = """You are an expert academic research assistant specializing in materials science. Your task is to find and format research articles about materials based on the user's query.

Return a JSON object with an "entries" array. Each entry has:
title, authors (array), abstract, journal, year (integer), doi, url, sourceDatabase, keywords (array), citationCount (integer), materialRelevance.

Focus on real, credible research articles from: {sources}
Prioritize recent publications and provide accurate DOIs when possible.
Return ONLY valid JSON, no additional text."""


def normalize_title(title) -> str:
    return " ".join(str(title or "").lower().split())


def dedupe_by_title(entries):
    seen = set()
    unique = []
    for entry in entries:
        key = normalize_title(entry.get("title"))
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def merge_results(result_sets):
    """
    소스별 결과 병합: 정규화한 제목으로 중복 제거(먼저 온 것 우선),
    연도 내림차순 -> 인용 수 내림차순
    """
    combined = dedupe_by_title(e for results in result_sets for e in (results or []))
    combined.sort(key=lambda e: (e.get("year") or 0, e.get("citation_count") or 0), reverse=True)
    return combined


def _source_hint(sources):
    if not sources:
        return "all major academic databases"
    known = {s.lower(): s for s in ACADEMIC_SOURCES}
    return ", ".join(known.get(s.lower(), s) for s in sources)


def _from_ai_entry(raw):
    return {
        "title": raw.get("title") or "Untitled",
        "authors": list(raw.get("authors") or []),
        "abstract": raw.get("abstract") or "",
        "journal": raw.get("journal") or "",
        "year": raw.get("year") if isinstance(raw.get("year"), int) else None,
        "doi": raw.get("doi") or "",
        "url": raw.get("url") or "",
        "source_database": raw.get("sourceDatabase") or "AI",
        "keywords": list(raw.get("keywords") or []),
        "citation_count": raw.get("citationCount") if isinstance(raw.get("citationCount"), int) else 0,
        "material_relevance": raw.get("materialRelevance") or "",
    }


def search_with_ai(query: str, sources, max_results: int):
    hint = _source_hint(sources)
    parsed = complete_json(
        BIBLIOGRAPHY_SYSTEM_PROMPT.format(sources=hint),
        f'Search for {max_results} research articles about: "{query}"\n'
        f"Look for articles from these academic sources: {hint}\n"
        'Return the results as a JSON object with an "entries" array.',
    )
    if not parsed:
        return []
    entries = [_from_ai_entry(e) for e in (parsed.get("entries") or []) if isinstance(e, dict)]
    current_app.logger.info(f"[BIBLIOGRAPHY] AI returned {len(entries)} entries")
    return entries


def search_bibliography(query: str, sources=None, max_results: int = 10, include_ai: bool = True):
    sources = sources or []
    half = max(1, math.ceil(max_results / 2))
    current_app.logger.info(
        f"[BIBLIOGRAPHY] searching q={query!r} sources={', '.join(sources) or 'all'}"
    )

    result_sets = [
        search_pubmed(f"{query} materials", half),
        search_crossref(f"{query} materials science", half),
    ]
    if include_ai:
        result_sets.append(search_with_ai(query, sources, max_results))

    combined = merge_results(result_sets)
    final = combined[:max_results]
    current_app.logger.info(f"[BIBLIOGRAPHY] returning {len(final)} of {len(combined)} unique entries")
    return {
        "entries": final,
        "sources": list(ACADEMIC_SOURCES),
        "total_found": len(combined),
    }
