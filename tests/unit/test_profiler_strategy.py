"""Unit tests for source profiling and insight strategy selection"""

from datetime import date, timedelta

import pytest

from cashpilot_insights.domain.models import SourceProfile
from cashpilot_insights.domain.profiler import (
    calculate_accuracy,
    find_duplicate_transactions,
    manual_data_quality,
    profile_data_sources,
)
from cashpilot_insights.domain.strategy import (
    BASE_INSIGHT_TYPES,
    calculate_confidence_level,
    determine_insight_types,
    identify_limitations,
    select_insight_strategy,
    select_primary_source,
)


def _profile(source="manual", quality=90.0, coverage=90.0, completeness=90.0, recommendations=None) -> SourceProfile:
    return SourceProfile(
        source=source,
        data_quality=quality,
        coverage=coverage,
        completeness=completeness,
        recency=100.0,
        accuracy=100.0,
        recommendations=recommendations or [],
    )


# --- Profiler ---


def test_profiles_only_observed_sources(manual_transactions, platform_transactions, as_of):
    profiles = profile_data_sources(manual_transactions + platform_transactions, as_of=as_of)

    assert [p.source for p in profiles] == ["manual", "shopify"]
    assert profiles[0].coverage == pytest.approx(62.5)
    assert profiles[1].coverage == pytest.approx(37.5)
    assert sum(p.coverage for p in profiles) == pytest.approx(100.0)


def test_manual_profile_clean_data(manual_transactions, as_of):
    (profile,) = profile_data_sources(manual_transactions, as_of=as_of)

    assert profile.data_quality == 100.0
    assert profile.completeness == 100.0
    assert profile.accuracy == 100.0
    # Two of five transactions fall in the last 30 days
    assert profile.recency == pytest.approx(40.0)
    assert profile.strengths == ["Well-categorized transactions"]
    assert profile.weaknesses == []


def test_manual_quality_penalties(txn, as_of):
    day = as_of - timedelta(days=3)
    transactions = [
        txn("1", day, 100.0, description="ab"),
        txn("2", day, 100.0, description="ab", category="Food"),
        txn("3", day, 2_000_000.0, description="Big sale", category="Sales"),
        txn("4", day, 50.0, description="Lunch", category="Meals"),
    ]

    # 30 * 2/4 poor descriptions, 25 * 1/4 uncategorized, 20 * 1/4 duplicates, 15 * 1/4 implausible
    assert manual_data_quality(transactions) == pytest.approx(70.0)

    (profile,) = profile_data_sources(transactions, as_of=as_of)
    assert profile.completeness == pytest.approx(75.0)
    assert profile.accuracy == pytest.approx(75.0)
    assert "1 uncategorized transactions" in profile.weaknesses
    assert "Add descriptions to transactions" in profile.recommendations


def test_find_duplicate_transactions_returns_later_occurrences(txn):
    first = txn("1", date(2024, 6, 1), 10.0, description="Coffee")
    second = txn("2", date(2024, 6, 1), 10.0, description="Coffee")
    other = txn("3", date(2024, 6, 2), 10.0, description="Coffee")

    assert find_duplicate_transactions([first, second, other]) == [second]


def test_accuracy_tolerates_one_day_of_clock_skew(txn, as_of):
    transactions = [
        txn("1", as_of + timedelta(days=1), 10.0, description="Tomorrow"),
        txn("2", as_of + timedelta(days=2), 10.0, description="Later"),
    ]
    assert calculate_accuracy(transactions, as_of) == pytest.approx(50.0)


def test_platform_quality_penalizes_missing_customer_info(platform_transactions, as_of):
    (profile,) = profile_data_sources(platform_transactions, as_of=as_of)

    assert profile.source == "shopify"
    assert profile.data_quality == pytest.approx(95.0 - 10.0 / 3)
    assert "Automated data collection" in profile.strengths


def test_accounting_and_bank_feed_quality(txn, as_of):
    day = as_of - timedelta(days=1)
    profiles = profile_data_sources(
        [
            txn("1", day, 10.0, description="Invoice 1", category="Sales", source="quickbooks"),
            txn("2", day, 10.0, description="Invoice 2", source="quickbooks"),
            txn("3", day, 10.0, description="ACH", category="Rent", source="plaid"),
            txn("4", day, 10.0, description="POS", source="plaid"),
        ],
        as_of=as_of,
    )

    quality = {p.source: p.data_quality for p in profiles}
    assert quality == {"quickbooks": pytest.approx(82.5), "plaid": pytest.approx(80.0)}


def test_no_transactions_no_profiles(as_of):
    assert profile_data_sources([], as_of=as_of) == []


# --- Strategy ---


def test_confidence_high_then_medium_when_coverage_drops():
    high = [_profile("manual"), _profile("shopify")]
    assert calculate_confidence_level(high) == "high"

    medium = [_profile("manual"), _profile("shopify", coverage=40.0)]
    assert calculate_confidence_level(medium) == "medium"


def test_confidence_low():
    assert calculate_confidence_level([_profile(quality=40.0, coverage=40.0)]) == "low"
    assert calculate_confidence_level([]) == "low"


def test_select_primary_source_weighted_score():
    manual = _profile("manual", quality=60.0, coverage=70.0, completeness=50.0)
    shopify = _profile("shopify", quality=95.0, coverage=30.0, completeness=100.0)
    assert select_primary_source([manual, shopify]) == "shopify"


def test_select_primary_source_tie_keeps_first():
    assert select_primary_source([_profile("quickbooks"), _profile("plaid")]) == "quickbooks"


def test_insight_types_start_with_base():
    assert determine_insight_types("manual") == BASE_INSIGHT_TYPES + ["custom-analysis", "flexible-reporting"]
    assert determine_insight_types("shopify")[: len(BASE_INSIGHT_TYPES)] == BASE_INSIGHT_TYPES


def test_limitations_for_weak_primary():
    profile = _profile("manual", quality=60.0, coverage=40.0, completeness=50.0)

    limitations = identify_limitations(profile, "manual")
    assert limitations[:3] == [
        "Limited data coverage (40.0%)",
        "Data quality issues may affect insight accuracy",
        "Incomplete data may limit analysis depth",
    ]
    assert "Manual data entry may have inconsistencies" in limitations


def test_strategy_for_weak_manual_source():
    profile = _profile("manual", quality=60.0, coverage=60.0, recommendations=["Categorize uncategorized transactions"])

    strategy = select_insight_strategy([profile])

    assert strategy.primary_source == "manual"
    assert strategy.secondary_sources == []
    assert strategy.recommendations[:2] == [
        "Categorize uncategorized transactions",
        "Connect additional data sources for comprehensive insights",
    ]
    assert "Consider connecting Shopify for e-commerce insights" in strategy.recommendations


def test_strategy_ranks_secondary_sources():
    profiles = [
        _profile("manual", quality=50.0, coverage=10.0, completeness=50.0),
        _profile("shopify", quality=95.0, coverage=60.0, completeness=100.0),
        _profile("plaid", quality=85.0, coverage=30.0, completeness=90.0),
    ]

    strategy = select_insight_strategy(profiles)
    assert strategy.primary_source == "shopify"
    assert strategy.secondary_sources == ["plaid", "manual"]


def test_strategy_without_profiles():
    strategy = select_insight_strategy([])

    assert strategy.primary_source == "manual"
    assert strategy.secondary_sources == []
    assert strategy.confidence_level == "low"
    assert strategy.insight_types == determine_insight_types("manual")
    assert strategy.limitations == ["No primary data source available"]
    assert strategy.recommendations == ["Start by adding some transactions manually"]
