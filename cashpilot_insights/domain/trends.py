"""Period-over-period trend classification"""

from typing import List, Sequence

from cashpilot_insights.domain import thresholds as t
from cashpilot_insights.domain.models import (
    CustomerData,
    ExpenseData,
    RevenueData,
    TrendAnalysis,
    TrendDirection,
    Trends,
)
from cashpilot_insights.domain.scoring import aligned_net_cash_flow, period_change

TREND_PERIOD_LABEL = "Last 6 months"


def classify_trend(values: Sequence[float], threshold: float = t.TREND_CHANGE) -> TrendDirection:
    """Increasing/decreasing when the window change exceeds +/- threshold percent"""
    change = period_change(values)
    if change is None:
        return "stable"
    if change > threshold:
        return "increasing"
    if change < -threshold:
        return "decreasing"
    return "stable"


def calculate_trend_confidence(transaction_count: int) -> int:
    """
    Stepped confidence from transaction volume.

    Calibration only: says nothing about variance in the underlying series.
    """
    for upper_bound, confidence in t.TREND_CONFIDENCE_STEPS:
        if transaction_count < upper_bound:
            return confidence
    return t.TREND_CONFIDENCE_MAX


def generate_trend_insights(trends: Trends) -> List[str]:
    insights: List[str] = []

    if trends.revenue == "increasing" and trends.expenses == "stable":
        insights.append("Revenue is growing while expenses remain stable - excellent trend")
    elif trends.revenue == "increasing" and trends.expenses == "increasing":
        insights.append("Both revenue and expenses are increasing - monitor profit margins")
    elif trends.revenue == "decreasing" and trends.expenses == "increasing":
        insights.append("Revenue is declining while expenses are rising - immediate action needed")
    elif trends.revenue == "decreasing" and trends.expenses in ("stable", "decreasing"):
        insights.append("Revenue is declining - review pricing and sales pipeline")

    if trends.cash_flow == "increasing":
        insights.append("Cash flow is improving - good financial health indicator")
    elif trends.cash_flow == "decreasing":
        insights.append("Cash flow is declining - review revenue and expense management")

    if trends.customers == "increasing":
        insights.append("Customer base is growing - positive for long-term sustainability")
    elif trends.customers == "decreasing":
        insights.append("Customer growth is slowing - focus on customer acquisition and retention")

    return insights


def analyze_trends(
    revenue: RevenueData,
    expenses: ExpenseData,
    customers: CustomerData,
    transaction_count: int,
) -> TrendAnalysis:
    """Classify revenue, expenses, cash flow and customers independently"""
    trends = Trends(
        revenue=classify_trend(list(revenue.revenue_by_period.values())),
        expenses=classify_trend(list(expenses.expenses_by_period.values())),
        # Difference of differences is noisier; wider band
        cash_flow=classify_trend(aligned_net_cash_flow(revenue, expenses), t.CASH_FLOW_TREND_CHANGE),
        customers=classify_trend([float(v) for v in customers.customers_by_period.values()]),
    )

    return TrendAnalysis(
        period=TREND_PERIOD_LABEL,
        trends=trends,
        confidence=calculate_trend_confidence(transaction_count),
        insights=generate_trend_insights(trends),
    )
