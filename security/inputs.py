"""
inputs.py: JSON 입력 검증 및 프롬프트 인젝션 방지
"""

from functools import wraps
from flask import request, abort, g
from jsonschema import validate, ValidationError

MAX_PAYLOAD_BYTES = 256 * 1024

BANNED_LLM_PATTERNS = (
    "ignore previous instructions",
    "system prompt",
    "jailbreak",
    "```",
)


def _sanitize_payload(value, for_llm=False):
    """문자열 trim + (for_llm) 프롬프트 인젝션 패턴 차단. list/dict 는 재귀"""
    if isinstance(value, str):
        temp = value.strip()
        if for_llm:
            lower_temp = temp.lower()
            for pat in BANNED_LLM_PATTERNS:
                if pat in lower_temp:
                    abort(400, description="LLM prompt injection detected.")
        return temp

    elif isinstance(value, list):
        return [_sanitize_payload(v, for_llm=for_llm) for v in value]

    elif isinstance(value, dict):
        return {k: _sanitize_payload(v, for_llm=for_llm) for k, v in value.items()}

    return value


def _validate_schema(data, schema):
    if not schema:
        return
    try:
        validate(instance=data, schema=schema)
    except ValidationError as e:
        abort(400, description=f"validation failed: {e.message}")


def require_safe_input(json_schema=None, *, for_llm_fields=None):
    """
    JSON body 검증 데코레이터
      - json_schema : JSON 스키마(dict)
      - for_llm_fields : LLM 프롬프트로 전달되는 필드 이름
    통과한 값은 g.safe_input 에 저장
    """
    for_llm_fields = set(for_llm_fields or [])

    def deco(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            cl = request.content_length
            if cl and cl > MAX_PAYLOAD_BYTES:
                abort(413, description="request body too large")

            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                abort(400, description="JSON object body required")

            safe = {k: _sanitize_payload(v, for_llm=(k in for_llm_fields)) for k, v in payload.items()}
            _validate_schema(safe, json_schema)

            g.safe_input = safe
            return f(*args, **kwargs)
        return wrapped
    return deco


# -------------------- 스키마 --------------------
search_schema = {
    "type": "object",
    "properties": {
        "query": {"type": "string", "maxLength": 500},
    },
    "additionalProperties": True,
}

bibliography_schema = {
    "type": "object",
    "properties": {
        "query": {"type": ["string", "null"], "maxLength": 500},
        "sources": {"type": "array", "items": {"type": "string"}, "maxItems": 20},
        "max_results": {"type": "integer", "minimum": 1, "maximum": 50},
        "include_ai": {"type": "boolean"},
    },
    "additionalProperties": True,
}

property_lookup_schema = {
    "type": "object",
    "properties": {
        "material_name": {"type": ["string", "null"], "maxLength": 200},
        "property_name": {"type": ["string", "null"], "maxLength": 200},
    },
    "additionalProperties": True,
}

categorize_schema = {
    "type": "object",
    "properties": {
        "properties": {"type": "array", "items": {"type": "string", "maxLength": 200}, "maxItems": 500},
    },
    "required": ["properties"],
    "additionalProperties": True,
}
