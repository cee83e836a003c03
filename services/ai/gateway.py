import json
import re
import time

from flask import current_app
from openai import OpenAI, OpenAIError

_JSON_BLOCK = re.compile(r"\{[\s\S]*\}")


def init_ai_client(app):
    cfg = app.config
    if not cfg.get("AI_GATEWAY_API_KEY"):
        app.ai_client = None
        return
    app.ai_client = OpenAI(
        api_key=cfg["AI_GATEWAY_API_KEY"],
        base_url=cfg.get("AI_GATEWAY_BASE_URL"),
        timeout=cfg.get("AI_GATEWAY_TIMEOUT", 30),
        max_retries=0,
    )


def _extract_json(content: str):
    m = _JSON_BLOCK.search(content or "")
    if not m:
        return None
    try:
        return json.loads(m.group(0))
    except ValueError:
        return None


def complete_json(system_prompt: str, user_prompt: str):
    """
    chat completion 후 응답에서 첫 JSON 객체를 파싱해 반환.
    미설정/오류/파싱 실패는 모두 None (재시도 없음)
    """
    client = getattr(current_app, "ai_client", None)
    if client is None:
        current_app.logger.warning("[AI] gateway not configured")
        return None

    model_name = current_app.config.get("AI_GATEWAY_MODEL")
    start = time.perf_counter()
    try:
        completion = client.chat.completions.create(
            model=model_name,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
    except OpenAIError as e:
        current_app.logger.error(f"[AI] completion failed model={model_name}: {e}")
        return None
    latency_ms = int((time.perf_counter() - start) * 1000)

    choices = completion.choices or []
    content = getattr(getattr(choices[0], "message", None), "content", None) if choices else None
    parsed = _extract_json(content)
    if parsed is None:
        current_app.logger.warning(f"[AI] could not parse JSON from response model={model_name}")
        return None

    current_app.logger.info(f"[AI] ok model={model_name} latency_ms={latency_ms}")
    return parsed
