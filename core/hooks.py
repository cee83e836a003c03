from flask import request, abort, current_app

from auth.entitlements import load_entitlement


# -------------------- 요청 단위 권한 컨텍스트 --------------------

def load_request_entitlement():
    if request.path.startswith("/static") or request.path == "/health":
        return
    load_entitlement()


def guard_payload_size():
    if request.content_length and request.content_length > 256 * 1024:
        abort(413)


# -------------------- 400 디버그 로그 --------------------

def log_bad_requests(resp):
    if resp.status_code == 400:
        current_app.logger.info(
            f"[400] {request.method} {request.path} "
            f"content_type={request.content_type} resp={resp.get_data(as_text=True)[:500]}"
        )
    return resp


def register_hooks(app):
    app.before_request(guard_payload_size)
    app.before_request(load_request_entitlement)
    app.after_request(log_bad_requests)
