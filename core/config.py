import os


def _csv(v: str):
    return [x.strip() for x in (v or "").split(",") if x.strip()]


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class Config:
    # Flask 보안 키
    SECRET_KEY = os.getenv("SECRET_KEY", "local-dev-secret")

    ENV = os.getenv("FLASK_ENV", "production")
    TESTING = False

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_recycle": 280,
    }

    # -------------------------
    # CORS
    # -------------------------
    CORS_ORIGINS = [o.rstrip("/") for o in _csv(os.getenv(
        "CORS_ORIGINS",
        "http://localhost:8080,http://127.0.0.1:8080",
    ))]

    # -------------------------
    # Rate limiting (Flask-Limiter 표준 키)
    # -------------------------
    REDIS_URL = os.getenv("REDIS_URL", "")
    RATELIMIT_STORAGE_URI = REDIS_URL if REDIS_URL else "memory://"
    RATELIMIT_DEFAULT = os.getenv("RATELIMIT_DEFAULT", "200 per hour")
    RATELIMIT_ENABLED = _env_bool("RATELIMIT_ENABLED", True)

    # -------------------------
    # Stripe (구독 상태 원천)
    # -------------------------
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "").strip()
    STRIPE_API_VERSION = os.getenv("STRIPE_API_VERSION", "2025-08-27.basil")

    # -------------------------
    # AI gateway (OpenAI 호환)
    # -------------------------
    AI_GATEWAY_BASE_URL = os.getenv("AI_GATEWAY_BASE_URL", "https://ai.gateway.lovable.dev/v1").rstrip("/")
    AI_GATEWAY_API_KEY = os.getenv("AI_GATEWAY_API_KEY", "").strip()
    AI_GATEWAY_MODEL = os.getenv("AI_GATEWAY_MODEL", "google/gemini-2.5-flash")
    AI_GATEWAY_TIMEOUT = _env_int("AI_GATEWAY_TIMEOUT", 30)

    # -------------------------
    # 학술 API (PubMed / CrossRef)
    # -------------------------
    PUBMED_API_BASE = os.getenv("PUBMED_API_BASE", "https://eutils.ncbi.nlm.nih.gov/entrez/eutils").rstrip("/")
    PUBCHEM_API_BASE = os.getenv("PUBCHEM_API_BASE", "https://pubchem.ncbi.nlm.nih.gov/rest/pug").rstrip("/")
    CROSSREF_API_BASE = os.getenv("CROSSREF_API_BASE", "https://api.crossref.org").rstrip("/")
    CROSSREF_MAILTO = os.getenv("CROSSREF_MAILTO", "research@materialink.io")
    ACADEMIC_TIMEOUT = _env_int("ACADEMIC_TIMEOUT", 10)

    # Materials Project (키 없으면 조회 생략)
    MATERIALS_PROJECT_API_BASE = os.getenv("MATERIALS_PROJECT_API_BASE", "https://api.materialsproject.org").rstrip("/")
    MATERIALS_PROJECT_API_KEY = os.getenv("MATERIALS_PROJECT_API_KEY", "").strip()

    # 업그레이드 안내 링크
    PRICING_URL = os.getenv("PRICING_URL", "/pricing")


class TestConfig(Config):
    TESTING = True
    ENV = "development"
    SECRET_KEY = "test-secret-key"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    RATELIMIT_STORAGE_URI = "memory://"
    STRIPE_SECRET_KEY = "sk_test_dummy"
    AI_GATEWAY_API_KEY = "test-ai-key"
    MATERIALS_PROJECT_API_KEY = ""
