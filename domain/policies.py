# policies.py
import math
from enum import Enum


class Tier(str, Enum):
    FREE = "free"
    RESEARCHER_LITE = "researcher_lite"
    RESEARCHER_PREMIUM = "researcher_premium"
    INDUSTRY_LITE = "industry_lite"
    INDUSTRY_PREMIUM = "industry_premium"

    @classmethod
    def parse(cls, value) -> "Tier":
        """알 수 없는 값/None 은 free 로 취급 (예외 없음)"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            return cls.FREE


LITE_TIERS = frozenset({Tier.RESEARCHER_LITE, Tier.INDUSTRY_LITE})
PREMIUM_TIERS = frozenset({Tier.RESEARCHER_PREMIUM, Tier.INDUSTRY_PREMIUM})

# required tier -> 접근 가능한 사용자 tier 목록
# researcher_premium / industry_lite 는 서로 포함 관계가 아님
_ACCESS_LIST = {
    Tier.FREE: list(Tier),
    Tier.RESEARCHER_LITE: [
        Tier.RESEARCHER_LITE,
        Tier.RESEARCHER_PREMIUM,
        Tier.INDUSTRY_LITE,
        Tier.INDUSTRY_PREMIUM,
    ],
    Tier.RESEARCHER_PREMIUM: [Tier.RESEARCHER_PREMIUM, Tier.INDUSTRY_PREMIUM],
    Tier.INDUSTRY_LITE: [Tier.INDUSTRY_LITE, Tier.INDUSTRY_PREMIUM],
    Tier.INDUSTRY_PREMIUM: [Tier.INDUSTRY_PREMIUM],
}

TIER_ACCESS = {required: frozenset(allowed) for required, allowed in _ACCESS_LIST.items()}


# 기능 키 -> 필요한 최소 tier
FEATURES = {
    "material_search": Tier.FREE,
    "research_tools": Tier.RESEARCHER_LITE,
    "bibliography_search": Tier.RESEARCHER_LITE,
    "lab_recipes": Tier.RESEARCHER_LITE,
    "property_prediction": Tier.RESEARCHER_PREMIUM,
    "suppliers": Tier.INDUSTRY_LITE,
    "process_optimization": Tier.INDUSTRY_LITE,
    "api_access": Tier.INDUSTRY_PREMIUM,
}


UNLIMITED = math.inf

LIMITS = {
    Tier.FREE: {"daily": 5},
    Tier.RESEARCHER_LITE: {"monthly": 100},
    Tier.INDUSTRY_LITE: {"monthly": 100},
    Tier.RESEARCHER_PREMIUM: {},
    Tier.INDUSTRY_PREMIUM: {},
}

FREE_DAILY_LIMIT = LIMITS[Tier.FREE]["daily"]
LITE_MONTHLY_LIMIT = LIMITS[Tier.RESEARCHER_LITE]["monthly"]


# Tier gate / 가격표 표시용
TIER_CONFIG = {
    Tier.FREE: {
        "label": "Free",
        "monthly_price": 0,
        "annual_price": 0,
        "search_limit": "5 searches/day",
        "features": [
            "5 AI-powered searches per day",
            "Access to material database",
            "Basic material properties",
            "Sustainability scores",
        ],
    },
    Tier.RESEARCHER_LITE: {
        "label": "Researcher Lite",
        "monthly_price": 29,
        "annual_price": 290,
        "search_limit": "100 searches/month",
        "features": [
            "100 AI searches per month",
            "Full material database access",
            "Lab recipes & protocols",
            "Bibliography search tools",
            "Research material library",
        ],
    },
    Tier.RESEARCHER_PREMIUM: {
        "label": "Researcher Premium",
        "monthly_price": 49,
        "annual_price": 490,
        "search_limit": "Unlimited searches",
        "features": [
            "Unlimited AI searches",
            "Lab recipes & protocols",
            "Bibliography search tools",
            "Property prediction (AI)",
            "Export reports (PDF)",
        ],
    },
    Tier.INDUSTRY_LITE: {
        "label": "Industry Lite",
        "monthly_price": 149,
        "annual_price": 1490,
        "search_limit": "100 searches/month",
        "features": [
            "100 AI searches per month",
            "Supplier contact & pricing",
            "Process optimization tools",
            "Batch simulation",
            "Regulatory compliance data",
        ],
    },
    Tier.INDUSTRY_PREMIUM: {
        "label": "Industry Premium",
        "monthly_price": 249,
        "annual_price": 2490,
        "search_limit": "Unlimited searches",
        "features": [
            "Unlimited AI searches",
            "Everything in Industry Lite",
            "API access",
            "Dedicated account manager",
        ],
    },
}


# Stripe product id -> tier
PRODUCT_TO_TIER = {
    "prod_TuE4mwtUnj7Ott": Tier.RESEARCHER_LITE,
    "prod_TuE58iFRJANG1f": Tier.RESEARCHER_PREMIUM,
    "prod_TuE6k644OlPPWc": Tier.INDUSTRY_LITE,
    "prod_TuE6z5enLtycmI": Tier.INDUSTRY_PREMIUM,
}
