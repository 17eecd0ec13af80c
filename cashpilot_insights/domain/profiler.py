"""Per-source data-quality profiling"""

import logging
import math
from datetime import date
from typing import Callable, Dict, List, Sequence

from cashpilot_insights.config import settings
from cashpilot_insights.domain import thresholds as t
from cashpilot_insights.domain.adapters.aggregation import safe_divide
from cashpilot_insights.domain.models import SourceProfile, SourceTag, Transaction
from cashpilot_insights.utils.date_utils import days_before, resolve_as_of

logger = logging.getLogger(__name__)

PROFILED_SOURCES: Sequence[SourceTag] = ("manual", "shopify", "quickbooks", "plaid")


def _share(matching: int, total: int) -> float:
    return safe_divide(matching, total)


def _is_uncategorized(txn: Transaction) -> bool:
    return not txn.category or txn.category == t.UNCATEGORIZED


def _has_poor_description(txn: Transaction) -> bool:
    return not txn.description or len(txn.description) < t.MIN_DESCRIPTION_LENGTH


def _has_implausible_amount(txn: Transaction) -> bool:
    return txn.amount == 0 or not math.isfinite(txn.amount) or txn.amount > t.MAX_PLAUSIBLE_AMOUNT


def find_duplicate_transactions(transactions: Sequence[Transaction]) -> List[Transaction]:
    """Later occurrences of the same (date, amount, description)"""
    seen = set()
    duplicates = []
    for txn in transactions:
        key = (txn.date, txn.amount, txn.description)
        if key in seen:
            duplicates.append(txn)
        else:
            seen.add(key)
    return duplicates


def manual_data_quality(transactions: Sequence[Transaction]) -> float:
    """100 minus weighted shares of poor descriptions, uncategorized, duplicates, bad amounts"""
    n = len(transactions)
    score = 100.0
    score -= _share(sum(1 for x in transactions if _has_poor_description(x)), n) * 30
    score -= _share(sum(1 for x in transactions if _is_uncategorized(x)), n) * 25
    score -= _share(len(find_duplicate_transactions(transactions)), n) * 20
    score -= _share(sum(1 for x in transactions if _has_implausible_amount(x)), n) * 15
    return max(0.0, score)


def platform_data_quality(transactions: Sequence[Transaction]) -> float:
    """Platform feeds are structured; only missing customer info costs points"""
    missing_customer = sum(1 for x in transactions if "customer" not in (x.description or "").lower())
    return max(0.0, 95.0 - _share(missing_customer, len(transactions)) * 10)


def accounting_data_quality(transactions: Sequence[Transaction]) -> float:
    uncategorized = sum(1 for x in transactions if _is_uncategorized(x))
    return max(0.0, 90.0 - _share(uncategorized, len(transactions)) * 15)


def bank_feed_data_quality(transactions: Sequence[Transaction]) -> float:
    uncategorized = sum(1 for x in transactions if _is_uncategorized(x))
    return max(0.0, 85.0 - _share(uncategorized, len(transactions)) * 10)


QUALITY_SCORERS: Dict[str, Callable[[Sequence[Transaction]], float]] = {
    "manual": manual_data_quality,
    "shopify": platform_data_quality,
    "quickbooks": accounting_data_quality,
    "plaid": bank_feed_data_quality,
}


def calculate_coverage(source_transactions: Sequence[Transaction], all_transactions: Sequence[Transaction]) -> float:
    return _share(len(source_transactions), len(all_transactions)) * 100


def calculate_completeness(transactions: Sequence[Transaction]) -> float:
    incomplete = sum(
        1
        for x in transactions
        if not x.description or not x.category or not x.amount or not math.isfinite(x.amount)
    )
    return max(0.0, 100 - _share(incomplete, len(transactions)) * 100)


def calculate_recency(transactions: Sequence[Transaction], as_of: date) -> float:
    cutoff = days_before(as_of, settings.recent_window_days)
    return _share(sum(1 for x in transactions if x.date >= cutoff), len(transactions)) * 100


def calculate_accuracy(transactions: Sequence[Transaction], as_of: date) -> float:
    """Zero, non-finite or oversized amounts and dates past the allowed clock skew count as errors"""
    latest_valid = days_before(as_of, -settings.clock_skew_days)
    errors = sum(1 for x in transactions if _has_implausible_amount(x) or x.date > latest_valid)
    return max(0.0, 100 - _share(errors, len(transactions)) * 100)


def _manual_notes(transactions: Sequence[Transaction]) -> tuple[List[str], List[str], List[str]]:
    strengths: List[str] = []
    weaknesses: List[str] = []
    recommendations: List[str] = []

    if len(transactions) > 50:
        strengths.append("Comprehensive transaction history")

    uncategorized = sum(1 for x in transactions if _is_uncategorized(x))
    if _share(len(transactions) - uncategorized, len(transactions)) > 0.8:
        strengths.append("Well-categorized transactions")
    if uncategorized:
        weaknesses.append(f"{uncategorized} uncategorized transactions")
        recommendations.append("Categorize uncategorized transactions")

    poor_descriptions = sum(1 for x in transactions if _has_poor_description(x))
    if poor_descriptions:
        weaknesses.append(f"{poor_descriptions} transactions with poor descriptions")
        recommendations.append("Add descriptions to transactions")

    return strengths, weaknesses, recommendations


SOURCE_NOTES: Dict[str, tuple[List[str], List[str], List[str]]] = {
    "shopify": (
        ["Automated data collection", "Real-time sales data", "Customer information included", "Consistent data format"],
        ["Limited to e-commerce activities", "No expense tracking", "May miss cash transactions"],
        ["Connect additional data sources for comprehensive view", "Add manual transactions for non-e-commerce activities"],
    ),
    "quickbooks": (
        ["Professional accounting data", "Comprehensive expense tracking", "Tax-ready information", "High data accuracy"],
        ["Limited real-time updates", "Accounting-focused view", "May miss operational insights"],
        ["Connect e-commerce platforms for sales data", "Add manual transactions for cash activities"],
    ),
    "plaid": (
        ["Automated bank feed", "Complete cash movement record"],
        ["Bank descriptions are terse", "No customer or product detail"],
        ["Review auto-assigned categories", "Connect a commerce platform for customer data"],
    ),
}


def profile_source(
    source: SourceTag,
    source_transactions: Sequence[Transaction],
    all_transactions: Sequence[Transaction],
    as_of: date,
) -> SourceProfile:
    if source == "manual":
        strengths, weaknesses, recommendations = _manual_notes(source_transactions)
    else:
        strengths, weaknesses, recommendations = (list(notes) for notes in SOURCE_NOTES[source])

    return SourceProfile(
        source=source,
        data_quality=QUALITY_SCORERS[source](source_transactions),
        coverage=calculate_coverage(source_transactions, all_transactions),
        completeness=calculate_completeness(source_transactions),
        recency=calculate_recency(source_transactions, as_of),
        accuracy=calculate_accuracy(source_transactions, as_of),
        strengths=strengths,
        weaknesses=weaknesses,
        recommendations=recommendations,
    )


def profile_data_sources(transactions: Sequence[Transaction], as_of: date | None = None) -> List[SourceProfile]:
    """Profile every source that contributed at least one transaction"""
    as_of = resolve_as_of(as_of)
    profiles = []
    for source in PROFILED_SOURCES:
        source_transactions = [x for x in transactions if x.source == source]
        if source_transactions:
            profiles.append(profile_source(source, source_transactions, transactions, as_of))

    logger.debug("Profiled data sources", extra={"sources": [p.source for p in profiles]})
    return profiles
