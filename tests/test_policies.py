import pytest

from auth.entitlements import has_feature_access
from domain.policies import Tier, TIER_ACCESS, FEATURES, TIER_CONFIG, PRODUCT_TO_TIER


def test_parse_unknown_tier_defaults_to_free():
    assert Tier.parse(None) is Tier.FREE
    assert Tier.parse("") is Tier.FREE
    assert Tier.parse("enterprise") is Tier.FREE
    assert Tier.parse(" Researcher_Lite ") is Tier.RESEARCHER_LITE
    assert Tier.parse(Tier.INDUSTRY_PREMIUM) is Tier.INDUSTRY_PREMIUM


@pytest.mark.parametrize("tier", list(Tier))
def test_free_is_universal_lower_bound(tier):
    assert has_feature_access(tier, Tier.FREE)


@pytest.mark.parametrize("tier", list(Tier))
def test_industry_premium_only_for_itself(tier):
    assert has_feature_access(tier, Tier.INDUSTRY_PREMIUM) == (tier is Tier.INDUSTRY_PREMIUM)


def test_researcher_premium_and_industry_lite_are_incomparable():
    assert not has_feature_access(Tier.RESEARCHER_PREMIUM, Tier.INDUSTRY_LITE)
    assert not has_feature_access(Tier.INDUSTRY_LITE, Tier.RESEARCHER_PREMIUM)


def test_lite_research_features_reachable_from_industry_lite():
    assert has_feature_access(Tier.INDUSTRY_LITE, Tier.RESEARCHER_LITE)
    assert not has_feature_access(Tier.FREE, Tier.RESEARCHER_LITE)


def test_access_table_covers_every_tier():
    assert set(TIER_ACCESS) == set(Tier)
    for required, allowed in TIER_ACCESS.items():
        assert required in allowed


def test_unknown_user_tier_treated_as_free():
    assert has_feature_access("platinum", Tier.FREE)
    assert not has_feature_access("platinum", Tier.RESEARCHER_LITE)


def test_features_and_config_reference_known_tiers():
    assert all(isinstance(t, Tier) for t in FEATURES.values())
    assert set(TIER_CONFIG) == set(Tier)
    assert set(PRODUCT_TO_TIER.values()) == set(Tier) - {Tier.FREE}
