"""Financial health scoring engine - core business logic for the health score"""

import logging
import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from cashpilot_insights.domain import thresholds as t
from cashpilot_insights.domain.adapters.aggregation import safe_divide
from cashpilot_insights.domain.models import (
    CategoryScores,
    CustomerData,
    ExpenseData,
    FinancialHealthScore,
    HealthFactors,
    ProductData,
    RevenueData,
)
from cashpilot_insights.utils.date_utils import sorted_periods

logger = logging.getLogger(__name__)

NEGATIVE_CASH_FLOW_RECOMMENDATION = "Immediate action needed: reduce expenses or increase revenue"
NO_DATA_RECOMMENDATION = "No transaction data available to calculate health score"


def clamp(value: float, lo: float = t.SCORE_MIN, hi: float = t.SCORE_MAX) -> float:
    return max(lo, min(hi, value))


def period_change(values: Sequence[float]) -> Optional[float]:
    """
    Percent change of the recent window average over the prior window average.

    Windows are symmetric: up to TREND_WINDOW periods each, shrunk to half the
    available periods when history is short. Returns None with fewer than
    MIN_TREND_PERIODS periods. The prior average is taken in absolute value so
    a series that crosses zero (net cash flow) keeps the sign of its movement.
    """
    if len(values) < t.MIN_TREND_PERIODS:
        return None
    window = min(t.TREND_WINDOW, len(values) // 2)
    recent = values[-window:]
    prior = values[-2 * window : -window]
    recent_avg = sum(recent) / len(recent)
    prior_avg = sum(prior) / len(prior)
    return safe_divide(recent_avg - prior_avg, abs(prior_avg)) * 100


def aligned_net_cash_flow(revenue: RevenueData, expenses: ExpenseData) -> List[float]:
    """Revenue minus expenses per month, over the union of months (missing = 0)"""
    periods = sorted_periods(revenue.revenue_by_period, expenses.expenses_by_period)
    return [
        revenue.revenue_by_period.get(p, 0.0) - expenses.expenses_by_period.get(p, 0.0) for p in periods
    ]


def calculate_revenue_score(revenue: RevenueData) -> int:
    """
    Baseline 100, adjusted by:
    - growth of the recent 3-month average over the prior 3 months
    - recurring revenue share (higher is steadier)
    - number of revenue categories (diversity)
    """
    score = t.CATEGORY_BASELINE

    if revenue.total_revenue > 0:
        growth = period_change(list(revenue.revenue_by_period.values()))
        if growth is not None:
            if growth > t.REVENUE_GROWTH_STRONG:
                score += 20
            elif growth > 0:
                score += 10
            elif growth < t.REVENUE_DECLINE_STRONG:
                score -= 20
            elif growth < 0:
                score -= 10

        recurring_share = safe_divide(revenue.recurring_revenue, revenue.total_revenue) * 100
        if recurring_share > t.RECURRING_SHARE_HIGH:
            score += 15
        elif recurring_share > t.RECURRING_SHARE_GOOD:
            score += 10
        elif recurring_share < t.RECURRING_SHARE_LOW:
            score -= 10

    category_count = len(revenue.revenue_by_category)
    if category_count >= t.REVENUE_CATEGORIES_DIVERSE:
        score += 10
    elif category_count == 1:
        score -= 15

    return int(clamp(score))


def calculate_expense_score(expenses: ExpenseData, revenue: RevenueData) -> int:
    """Baseline 100, adjusted by expense ratio, categorization and cost structure"""
    score = t.CATEGORY_BASELINE

    if revenue.total_revenue > 0:
        expense_ratio = safe_divide(expenses.total_expenses, revenue.total_revenue) * 100
        if expense_ratio < t.EXPENSE_RATIO_EXCELLENT:
            score += 20
        elif expense_ratio < t.EXPENSE_RATIO_GOOD:
            score += 10
        elif expense_ratio > t.EXPENSE_RATIO_CRITICAL:
            score -= 30
        elif expense_ratio > t.EXPENSE_RATIO_HIGH:
            score -= 20

    category_count = len(expenses.expenses_by_category)
    if category_count >= t.EXPENSE_CATEGORIES_WELL_TRACKED:
        score += 10
    elif category_count <= t.EXPENSE_CATEGORIES_POOR:
        score -= 10

    if expenses.total_expenses > 0:
        operating_share = safe_divide(expenses.operating_expenses, expenses.total_expenses) * 100
        if operating_share < t.OPERATING_SHARE_LEAN:
            score += 10
        elif operating_share > t.OPERATING_SHARE_HEAVY:
            score -= 10

    return int(clamp(score))


def calculate_cash_flow_score(revenue: RevenueData, expenses: ExpenseData) -> int:
    """Baseline 100, adjusted by cash-flow margin and month-to-month consistency"""
    score = t.CATEGORY_BASELINE

    if revenue.total_revenue > 0:
        margin = safe_divide(revenue.total_revenue - expenses.total_expenses, revenue.total_revenue) * 100
        if margin > t.MARGIN_EXCELLENT:
            score += 25
        elif margin > t.MARGIN_GOOD:
            score += 15
        elif margin > t.MARGIN_FAIR:
            score += 5
        elif margin < 0:
            score -= 40
        elif margin < t.MARGIN_THIN:
            score -= 15

    monthly_net = aligned_net_cash_flow(revenue, expenses)[-t.CONSISTENCY_WINDOW :]
    if len(monthly_net) >= t.MIN_CONSISTENCY_PERIODS:
        consistency = sum(1 for net in monthly_net if net > 0) / len(monthly_net)
        if consistency > t.CONSISTENCY_HIGH:
            score += 15
        elif consistency > t.CONSISTENCY_FAIR:
            score += 5
        elif consistency < t.CONSISTENCY_LOW:
            score -= 20

    return int(clamp(score))


def calculate_customer_score(customers: CustomerData) -> int:
    """Baseline 100, adjusted by new-customer growth, lifetime value and churn"""
    score = t.CATEGORY_BASELINE

    if customers.total_customers > 0:
        growth = safe_divide(customers.new_customers, customers.total_customers) * 100
        if growth > t.CUSTOMER_GROWTH_STRONG:
            score += 20
        elif growth > t.CUSTOMER_GROWTH_GOOD:
            score += 10
        elif growth < t.CUSTOMER_GROWTH_WEAK:
            score -= 10

    # No industry benchmark; absolute dollar bands
    ltv = customers.customer_lifetime_value
    if ltv > 0:
        if ltv > t.LTV_HIGH:
            score += 15
        elif ltv > t.LTV_GOOD:
            score += 10
        elif ltv < t.LTV_LOW:
            score -= 10

    churn_pct = customers.churn_rate * 100
    if churn_pct > 0:
        if churn_pct < t.CHURN_EXCELLENT:
            score += 15
        elif churn_pct < t.CHURN_GOOD:
            score += 5
        elif churn_pct > t.CHURN_SEVERE:
            score -= 25
        elif churn_pct > t.CHURN_ELEVATED:
            score -= 15

    return int(clamp(score))


def top_product_share(products: ProductData) -> Optional[float]:
    """Top product's share (percent) of top-10 revenue, None without products"""
    if not products.top_selling_products:
        return None
    top10_revenue = sum(p.revenue for p in products.top_selling_products)
    return safe_divide(products.top_selling_products[0].revenue, top10_revenue) * 100


def calculate_operations_score(products: ProductData) -> int:
    """Baseline 100, adjusted by product diversity and top-product concentration"""
    score = t.CATEGORY_BASELINE

    if products.total_products > 0:
        if products.total_products >= t.PRODUCTS_DIVERSE:
            score += 15
        elif products.total_products >= t.PRODUCTS_FAIR:
            score += 10
        elif products.total_products == 1:
            score -= 15

    share = top_product_share(products)
    if share is not None:
        if share < t.TOP_PRODUCT_DIVERSIFIED:
            score += 10
        elif share > t.TOP_PRODUCT_CONCENTRATED:
            score -= 15

    return int(clamp(score))


def determine_grade(score: float) -> str:
    """
    Map overall score to a letter grade.

    Bands: 80+ A, 60+ B, 40+ C, 20+ D, else F
    """
    for minimum, grade in t.GRADE_BOUNDARIES:
        if score >= minimum:
            return grade
    return t.FALLBACK_GRADE


def weighted_overall(categories: CategoryScores) -> int:
    """Round half up the weighted category sum, clamped even though inputs are pre-clamped"""
    weights = t.CATEGORY_WEIGHTS
    weighted = (
        categories.revenue * weights["revenue"]
        + categories.expenses * weights["expenses"]
        + categories.cash_flow * weights["cash_flow"]
        + categories.customers * weights["customers"]
        + categories.operations * weights["operations"]
    )
    overall = math.floor(weighted + 0.5)
    return int(clamp(overall))


def identify_health_factors(
    revenue: RevenueData,
    expenses: ExpenseData,
    customers: CustomerData,
) -> HealthFactors:
    """Qualitative positives/negatives mirroring the scoring rubric"""
    positive: List[str] = []
    negative: List[str] = []
    recommendations: List[str] = []

    if revenue.total_revenue > 0:
        recurring_share = safe_divide(revenue.recurring_revenue, revenue.total_revenue) * 100
        if recurring_share > t.RECURRING_SHARE_HIGH:
            positive.append("Strong recurring revenue stream")
        elif recurring_share < t.RECURRING_SHARE_LOW:
            negative.append("Low recurring revenue")
            recommendations.append("Consider implementing subscription models or retainer agreements")

        expense_ratio = safe_divide(expenses.total_expenses, revenue.total_revenue) * 100
        if expense_ratio < t.EXPENSE_RATIO_EFFICIENT:
            positive.append("Efficient cost management")
        elif expense_ratio > t.EXPENSE_RATIO_HIGH:
            negative.append("High expense ratio")
            recommendations.append("Review and optimize your expense structure")

    net_cash_flow = revenue.total_revenue - expenses.total_expenses
    if net_cash_flow < 0:
        negative.append("Negative cash flow")
        # Always first: nothing else matters until cash flow turns positive
        recommendations.insert(0, NEGATIVE_CASH_FLOW_RECOMMENDATION)
    elif revenue.total_revenue > 0:
        margin = safe_divide(net_cash_flow, revenue.total_revenue) * 100
        if margin > t.MARGIN_GOOD:
            positive.append("Healthy cash flow margin")
        elif margin < t.MARGIN_THIN:
            negative.append("Low cash flow margin")
            recommendations.append("Focus on increasing revenue or reducing expenses")

    churn_pct = customers.churn_rate * 100
    if 0 < churn_pct < t.CHURN_EXCELLENT:
        positive.append("Low customer churn rate")
    elif churn_pct > t.CHURN_ELEVATED:
        negative.append("High customer churn rate")
        recommendations.append("Investigate customer satisfaction and retention strategies")

    if customers.customer_lifetime_value > t.LTV_GOOD:
        positive.append("High customer lifetime value")

    return HealthFactors(positive=positive, negative=negative, recommendations=recommendations)


def has_activity(
    revenue: RevenueData,
    expenses: ExpenseData,
    customers: CustomerData,
    products: ProductData,
) -> bool:
    return bool(
        revenue.total_revenue
        or expenses.total_expenses
        or customers.total_customers
        or products.total_products
    )


def calculate_financial_health_score(
    revenue: RevenueData,
    expenses: ExpenseData,
    customers: CustomerData,
    products: ProductData,
    now: datetime | None = None,
) -> FinancialHealthScore:
    """
    Main entry point: score canonical aggregates into a FinancialHealthScore.

    Weights: revenue 25%, expenses 25%, cash flow 25%, customers 15%,
    operations 10%. An all-zero snapshot scores 0 (grade F) rather than the
    category baselines, since there is nothing to be healthy about.
    """
    last_updated = now or datetime.now(timezone.utc)

    if not has_activity(revenue, expenses, customers, products):
        return FinancialHealthScore(
            overall=0,
            grade=t.FALLBACK_GRADE,
            categories=CategoryScores(revenue=0, expenses=0, cash_flow=0, customers=0, operations=0),
            factors=HealthFactors(recommendations=[NO_DATA_RECOMMENDATION]),
            last_updated=last_updated,
        )

    categories = CategoryScores(
        revenue=calculate_revenue_score(revenue),
        expenses=calculate_expense_score(expenses, revenue),
        cash_flow=calculate_cash_flow_score(revenue, expenses),
        customers=calculate_customer_score(customers),
        operations=calculate_operations_score(products),
    )
    overall = weighted_overall(categories)
    grade = determine_grade(overall)

    logger.debug("Health score calculated", extra={"overall": overall, "grade": grade})

    return FinancialHealthScore(
        overall=overall,
        grade=grade,
        categories=categories,
        factors=identify_health_factors(revenue, expenses, customers),
        last_updated=last_updated,
    )
