# utils/property_categories.py
# 속성 이름 -> 카테고리 (키워드 포함 여부, 선언 순서대로 첫 매치)

PROPERTY_CATEGORIES = {
    "description": {"label": "Description", "priority": 1},
    "physical": {"label": "Physical Properties", "priority": 2},
    "mechanical": {"label": "Mechanical Properties", "priority": 3},
    "thermal": {"label": "Thermal Properties", "priority": 4},
    "safety": {"label": "Safety & Hazards", "priority": 5},
    "environmental": {"label": "Environmental", "priority": 6},
}

DEFAULT_CATEGORY = "physical"

CATEGORY_KEYWORDS = {
    "description": (
        "iupac", "name", "cas", "formula", "description", "molecular weight",
        "synonym", "chemical structure", "complexity", "exact mass", "monoisotopic",
    ),
    "physical": (
        "density", "solubility", "melting", "boiling", "crystal", "space group",
        "xlogp", "lipophilicity", "polar surface", "h-bond", "hydrogen bond",
        "unit cell", "band gap", "formation energy", "energy above hull",
        "refractive", "viscosity", "color", "appearance", "odor", "ph",
    ),
    "mechanical": (
        "tensile", "strength", "elongation", "modulus", "hardness", "young",
        "shear", "flexural", "compressive", "impact", "fatigue", "creep",
        "wear", "friction", "elasticity", "stiffness", "ductility", "brittleness",
    ),
    "thermal": (
        "thermal", "conductivity", "expansion", "glass transition", "heat",
        "specific heat", "flammability", "ignition", "decomposition", "hdt",
        "deflection temperature", "vicat", "service temperature",
    ),
    "safety": (
        "hazard", "health", "ppe", "protective", "safety", "toxic",
        "ghs", "classification", "warning", "caution", "msds", "sds",
        "exposure", "limit", "lethal", "ld50", "carcinogenic", "mutagenic",
    ),
    "environmental": (
        "biodegradable", "biodegradability", "compostable", "renewable",
        "recyclable", "carbon footprint", "sustainability", "eco",
        "environmental", "bio-based", "lifecycle", "lca",
    ),
}

COMMON_PROPERTY_SUGGESTIONS = [
    "Tensile Strength",
    "Density",
    "Melting Point",
    "Glass Transition Temperature",
    "Thermal Conductivity",
    "Young's Modulus",
    "Elongation at Break",
    "Water Absorption",
    "Oxygen Permeability",
    "UV Resistance",
    "Chemical Resistance",
    "Biodegradation Rate",
    "Compostability",
    "Shore Hardness",
    "Flexural Modulus",
]


def categorize_property(property_name: str) -> str:
    lower_name = (property_name or "").lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        for keyword in keywords:
            if keyword in lower_name:
                return category
    return DEFAULT_CATEGORY


def sorted_categories():
    return sorted(
        ({"id": cid, **cfg} for cid, cfg in PROPERTY_CATEGORIES.items()),
        key=lambda c: c["priority"],
    )


def group_properties(property_names):
    """
    이름 목록을 카테고리별로 묶는다. 대소문자/공백 무시 중복 제거, 우선순위 순서
    """
    grouped = {cid: [] for cid in PROPERTY_CATEGORIES}
    seen = set()
    for name in property_names or []:
        clean = " ".join(str(name or "").split())
        key = clean.lower()
        if not clean or key in seen:
            continue
        seen.add(key)
        grouped[categorize_property(clean)].append(clean)

    return [
        {**cat, "properties": grouped[cat["id"]]}
        for cat in sorted_categories()
        if grouped[cat["id"]]
    ]
