from functools import wraps
from flask import make_response, jsonify


def _no_store(resp):
    resp.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, max-age=0"
    resp.headers["Pragma"] = "no-cache"
    resp.headers["Expires"] = "0"
    return resp


def nocache(view):
    @wraps(view)
    def _wrapped(*args, **kwargs):
        return _no_store(make_response(view(*args, **kwargs)))

    return _wrapped


# api 공통 응답
def _json_ok(payload=None, status=200):
    payload = payload or {}
    return _no_store(make_response(jsonify({"ok": True, **payload}), status))


def _json_err(code, message=None, status=400, **extra):
    body = {"ok": False, "error": code, "message": message, **extra}
    return _no_store(make_response(jsonify(body), status))
