"""Confidence-aware selection of the data source insights should trust"""

from typing import Dict, List, Sequence

from cashpilot_insights.domain import thresholds as t
from cashpilot_insights.domain.models import (
    AdaptiveInsightStrategy,
    ConfidenceLevel,
    DataSource,
    SourceProfile,
)

BASE_INSIGHT_TYPES = ["cash-flow-analysis", "basic-financial-metrics"]

INSIGHT_TYPES: Dict[str, List[str]] = {
    "manual": ["custom-analysis", "flexible-reporting"],
    "shopify": ["e-commerce-performance", "customer-behavior", "product-analytics", "sales-trends"],
    "quickbooks": ["accounting-insights", "expense-analysis", "financial-reporting"],
    "plaid": ["cash-flow-monitoring"],
    "combined": ["comprehensive-analysis", "cross-platform-insights"],
}

SOURCE_LIMITATIONS: Dict[str, List[str]] = {
    "manual": ["Manual data entry may have inconsistencies", "Limited historical data available"],
    "shopify": ["E-commerce focused - may miss other business activities", "Limited expense tracking capabilities"],
    "quickbooks": ["Accounting focused - may miss operational insights", "Limited real-time data availability"],
    "plaid": ["Bank feed only - no customer or product detail"],
}

SOURCE_RECOMMENDATIONS: Dict[str, List[str]] = {
    "manual": ["Consider connecting Shopify for e-commerce insights", "Connect QuickBooks for comprehensive accounting data"],
    "shopify": ["Add manual transactions for non-e-commerce activities", "Connect QuickBooks for expense tracking and accounting"],
    "quickbooks": ["Connect Shopify for e-commerce sales data", "Add manual transactions for cash transactions"],
    "plaid": ["Connect Shopify or QuickBooks for richer business context"],
    "combined": ["Excellent data coverage - focus on data quality improvements"],
}

DEFAULT_PRIMARY_SOURCE: DataSource = "manual"


def primary_score(profile: SourceProfile) -> float:
    return (
        profile.data_quality * t.PRIMARY_QUALITY_WEIGHT
        + profile.coverage * t.PRIMARY_COVERAGE_WEIGHT
        + profile.completeness * t.PRIMARY_COMPLETENESS_WEIGHT
    )


def select_primary_source(profiles: Sequence[SourceProfile]) -> DataSource:
    """Highest weighted score wins; the earlier profile wins a tie"""
    if not profiles:
        return DEFAULT_PRIMARY_SOURCE
    best = profiles[0]
    for profile in profiles[1:]:
        if primary_score(profile) > primary_score(best):
            best = profile
    return best.source


def rank_secondary_sources(profiles: Sequence[SourceProfile], primary: DataSource) -> List[DataSource]:
    secondaries = [p for p in profiles if p.source != primary]
    secondaries.sort(key=primary_score, reverse=True)
    return [p.source for p in secondaries]


def determine_insight_types(primary: DataSource) -> List[str]:
    return BASE_INSIGHT_TYPES + INSIGHT_TYPES.get(primary, [])


def calculate_confidence_level(profiles: Sequence[SourceProfile]) -> ConfidenceLevel:
    """Average quality and coverage across all profiled sources, not just the primary"""
    if not profiles:
        return "low"
    avg_quality = sum(p.data_quality for p in profiles) / len(profiles)
    avg_coverage = sum(p.coverage for p in profiles) / len(profiles)
    overall = (avg_quality + avg_coverage) / 2

    if overall >= t.CONFIDENCE_HIGH:
        return "high"
    if overall >= t.CONFIDENCE_MEDIUM:
        return "medium"
    return "low"


def identify_limitations(primary_profile: SourceProfile | None, primary: DataSource) -> List[str]:
    if primary_profile is None:
        return ["No primary data source available"]

    limitations: List[str] = []
    if primary_profile.coverage < t.LIMITED_COVERAGE:
        limitations.append(f"Limited data coverage ({primary_profile.coverage:.1f}%)")
    if primary_profile.data_quality < t.LOW_QUALITY:
        limitations.append("Data quality issues may affect insight accuracy")
    if primary_profile.completeness < t.INCOMPLETE:
        limitations.append("Incomplete data may limit analysis depth")
    limitations.extend(SOURCE_LIMITATIONS.get(primary, []))
    return limitations


def generate_adaptive_recommendations(primary_profile: SourceProfile | None, primary: DataSource) -> List[str]:
    if primary_profile is None:
        return ["Start by adding some transactions manually"]

    recommendations: List[str] = []
    if primary_profile.data_quality < t.QUALITY_IMPROVEMENT:
        recommendations.extend(primary_profile.recommendations)
    if primary_profile.coverage < t.COVERAGE_IMPROVEMENT:
        recommendations.append("Connect additional data sources for comprehensive insights")
    for recommendation in SOURCE_RECOMMENDATIONS.get(primary, []):
        if recommendation not in recommendations:
            recommendations.append(recommendation)
    return recommendations


def select_insight_strategy(profiles: Sequence[SourceProfile]) -> AdaptiveInsightStrategy:
    """Main entry point: choose which source to trust, and how much"""
    primary = select_primary_source(profiles)
    primary_profile = next((p for p in profiles if p.source == primary), None)

    return AdaptiveInsightStrategy(
        primary_source=primary,
        secondary_sources=rank_secondary_sources(profiles, primary),
        insight_types=determine_insight_types(primary),
        confidence_level=calculate_confidence_level(profiles),
        limitations=identify_limitations(primary_profile, primary),
        recommendations=generate_adaptive_recommendations(primary_profile, primary),
    )
