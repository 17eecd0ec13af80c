"""Business risk assessment from canonical aggregates"""

from typing import List

from cashpilot_insights.domain import thresholds as t
from cashpilot_insights.domain.adapters.aggregation import safe_divide
from cashpilot_insights.domain.models import (
    CustomerData,
    ExpenseData,
    ProductData,
    RevenueData,
    RiskAssessment,
    RiskFactors,
    RiskLevel,
)
from cashpilot_insights.domain.scoring import top_product_share


def calculate_cash_flow_risk(revenue: RevenueData, expenses: ExpenseData) -> int:
    """Negative net cash flow is critical regardless of margin"""
    net_cash_flow = revenue.total_revenue - expenses.total_expenses
    if net_cash_flow < 0:
        return t.NEGATIVE_CASH_FLOW_RISK

    margin = safe_divide(net_cash_flow, revenue.total_revenue) * 100
    for upper_bound, risk in t.CASH_FLOW_RISK_STEPS:
        if margin < upper_bound:
            return risk
    return t.CASH_FLOW_RISK_FLOOR


def calculate_customer_concentration_risk(customers: CustomerData) -> int:
    """
    Inverse step function of customer count.

    A coarse proxy: it ignores how revenue is spread across customers
    (no Gini/HHI), only how many customers there are.
    """
    for upper_bound, risk in t.CONCENTRATION_RISK_STEPS:
        if customers.total_customers < upper_bound:
            return risk
    return t.CONCENTRATION_RISK_FLOOR


def calculate_expense_risk(expenses: ExpenseData, revenue: RevenueData) -> int:
    if revenue.total_revenue == 0:
        return t.NO_REVENUE_EXPENSE_RISK

    expense_ratio = safe_divide(expenses.total_expenses, revenue.total_revenue) * 100
    for lower_bound, risk in t.EXPENSE_RISK_STEPS:
        if expense_ratio > lower_bound:
            return risk
    return t.EXPENSE_RISK_FLOOR


def calculate_revenue_risk(revenue: RevenueData, products: ProductData) -> int:
    """Additive: product concentration plus lack of recurring revenue, capped at 100"""
    risk = 0

    share = top_product_share(products)
    if share is not None:
        if share > t.TOP_PRODUCT_SHARE_SEVERE:
            risk += t.TOP_PRODUCT_SEVERE_RISK
        elif share > t.TOP_PRODUCT_SHARE_ELEVATED:
            risk += t.TOP_PRODUCT_ELEVATED_RISK

    if revenue.total_revenue > 0:
        recurring_share = safe_divide(revenue.recurring_revenue, revenue.total_revenue) * 100
        if recurring_share < t.RECURRING_SHARE_LOW:
            risk += t.RECURRING_SEVERE_RISK
        elif recurring_share < t.RECURRING_SHARE_GOOD:
            risk += t.RECURRING_ELEVATED_RISK

    return min(t.SCORE_MAX, risk)


def determine_risk_level(factors: RiskFactors) -> RiskLevel:
    """Unweighted average of the four factors: <25 low, <50 medium, <75 high, else critical"""
    average = (
        factors.cash_flow_risk
        + factors.customer_concentration_risk
        + factors.expense_risk
        + factors.revenue_risk
    ) / 4
    for upper_bound, level in t.RISK_LEVEL_STEPS:
        if average < upper_bound:
            return level
    return "critical"


def generate_risk_recommendations(factors: RiskFactors) -> List[str]:
    recommendations: List[str] = []

    if factors.cash_flow_risk > t.CASH_FLOW_RISK_ALERT:
        recommendations.append(
            "Immediate action needed: improve cash flow through cost reduction or revenue increase"
        )
    if factors.customer_concentration_risk > t.CONCENTRATION_RISK_ALERT:
        recommendations.append("Diversify customer base to reduce concentration risk")
    if factors.expense_risk > t.EXPENSE_RISK_ALERT:
        recommendations.append("Review and optimize expense structure to improve profitability")
    if factors.revenue_risk > t.REVENUE_RISK_ALERT:
        recommendations.append("Diversify revenue streams and increase recurring revenue")

    return recommendations


def assess_business_risks(
    revenue: RevenueData,
    expenses: ExpenseData,
    customers: CustomerData,
    products: ProductData,
) -> RiskAssessment:
    factors = RiskFactors(
        cash_flow_risk=calculate_cash_flow_risk(revenue, expenses),
        customer_concentration_risk=calculate_customer_concentration_risk(customers),
        expense_risk=calculate_expense_risk(expenses, revenue),
        revenue_risk=calculate_revenue_risk(revenue, products),
    )
    return RiskAssessment(
        level=determine_risk_level(factors),
        factors=factors,
        recommendations=generate_risk_recommendations(factors),
    )
