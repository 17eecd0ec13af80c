"""Financial assessment pipeline - profiles, adapts, scores and selects a strategy"""

import logging
from datetime import date, datetime
from typing import Iterable, Sequence

from cashpilot_insights.config import settings
from cashpilot_insights.domain.adapters.factory import create_data_adapter
from cashpilot_insights.domain.exceptions import SnapshotTooLargeError
from cashpilot_insights.domain.kpis import calculate_kpis
from cashpilot_insights.domain.models import FinancialAssessment, PlatformOrder, Transaction
from cashpilot_insights.domain.profiler import profile_data_sources
from cashpilot_insights.domain.risk import assess_business_risks
from cashpilot_insights.domain.scoring import calculate_financial_health_score
from cashpilot_insights.domain.strategy import select_insight_strategy
from cashpilot_insights.domain.trends import analyze_trends
from cashpilot_insights.utils.date_utils import resolve_as_of

logger = logging.getLogger(__name__)


def check_snapshot_size(transactions: Sequence[Transaction], limit: int | None = None) -> None:
    """Raise SnapshotTooLargeError when the snapshot exceeds the configured limit"""
    limit = settings.max_request_transactions if limit is None else limit
    if len(transactions) > limit:
        raise SnapshotTooLargeError(len(transactions), limit)


def assess_financial_health(
    transactions: Sequence[Transaction],
    orders: Iterable[PlatformOrder] = (),
    as_of: date | None = None,
    now: datetime | None = None,
) -> FinancialAssessment:
    """
    Main entry point: build the full assessment bundle for one snapshot.

    Flow:
    1. Profile each observed source
    2. Select/compose the data adapter and compute canonical aggregates
    3. Score health, classify trends, assess risk
    4. Select the insight strategy from the profiles

    Pure and synchronous: nothing is cached or persisted, so concurrent calls
    need no coordination as long as callers pass an immutable snapshot.
    """
    transactions = tuple(transactions)
    orders = tuple(orders)
    as_of = resolve_as_of(as_of)

    profiles = profile_data_sources(transactions, as_of=as_of)
    adapter = create_data_adapter(transactions, orders, as_of=as_of)

    revenue = adapter.get_revenue_data()
    expenses = adapter.get_expense_data()
    customers = adapter.get_customer_data()
    products = adapter.get_product_data()

    health_score = calculate_financial_health_score(revenue, expenses, customers, products, now=now)
    trends = analyze_trends(revenue, expenses, customers, transaction_count=len(transactions))
    risk = assess_business_risks(revenue, expenses, customers, products)
    strategy = select_insight_strategy(profiles)

    logger.debug(
        "Assessment computed",
        extra={
            "adapter": adapter.source,
            "overall": health_score.overall,
            "risk_level": risk.level,
            "confidence_level": strategy.confidence_level,
        },
    )

    return FinancialAssessment(
        data_source=adapter.source,
        data_available=adapter.is_data_available(),
        revenue=revenue,
        expenses=expenses,
        customers=customers,
        products=products,
        health_score=health_score,
        trends=trends,
        risk=risk,
        profiles=profiles,
        strategy=strategy,
        kpis=calculate_kpis(transactions, adapter, as_of=as_of),
    )
