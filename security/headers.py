from flask import current_app


def init_security_headers(app):

    @app.after_request
    def add_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        if current_app.config.get("ENV") != "development":
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=15552000; includeSubDomains; preload"
            )

        # JSON API 전용: 스크립트/프레임 없음
        resp.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'none'; frame-ancestors 'none'; form-action 'self'"
        )
        return resp
