import logging

from flask import Flask, request
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

import routes
from core.config import Config
from core.extensions import init_extensions
from core.hooks import register_hooks
from core.http_utils import _json_err
from security.headers import init_security_headers
from services.ai.gateway import init_ai_client


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    app.secret_key = app.config.get("SECRET_KEY")
    if not app.config.get("TESTING"):
        assert app.secret_key and app.secret_key != "local-dev-secret", \
            "SECURITY: set SECRET_KEY to a strong value"

    app.logger.setLevel(logging.DEBUG if app.config.get("ENV") == "development" else logging.INFO)

    init_extensions(app)
    init_security_headers(app)
    init_ai_client(app)

    # 쿠키 기본 설정
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=(app.config.get("ENV") != "development"),
    )

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    routes.register_routes(app)
    register_hooks(app)

    @app.errorhandler(HTTPException)
    def _json_http_error(e):
        if not request.path.startswith("/api/"):
            return e
        code = (e.name or "error").lower().replace(" ", "_")
        return _json_err(code, e.description, e.code or 500)

    app.logger.info(f"[APP] started env={app.config.get('ENV')} db_configured={bool(app.config.get('SQLALCHEMY_DATABASE_URI'))}")
    return app
