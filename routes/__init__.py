# routes/__init__.py
from .api.health import api_health_bp
from .api.usage import api_usage_bp
from .api.subscription import api_subscription_bp
from .api.search import api_search_bp
from .api.bibliography import api_bibliography_bp
from .api.properties import api_properties_bp


def register_routes(app):
    app.register_blueprint(api_health_bp)
    app.register_blueprint(api_usage_bp)
    app.register_blueprint(api_subscription_bp)
    app.register_blueprint(api_search_bp)
    app.register_blueprint(api_bibliography_bp)
    app.register_blueprint(api_properties_bp)
