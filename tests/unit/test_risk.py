"""Unit tests for business risk assessment"""

from datetime import timedelta

import pytest

from cashpilot_insights.domain.adapters.manual import ManualDataAdapter
from cashpilot_insights.domain.models import (
    CustomerData,
    ExpenseData,
    ProductData,
    ProductSummary,
    RevenueData,
    RiskFactors,
)
from cashpilot_insights.domain.risk import (
    assess_business_risks,
    calculate_cash_flow_risk,
    calculate_customer_concentration_risk,
    calculate_expense_risk,
    calculate_revenue_risk,
    determine_risk_level,
)


@pytest.mark.parametrize("expenses,risk", [(150, 90), (97, 70), (92, 50), (85, 30), (50, 10)])
def test_cash_flow_risk_steps(expenses, risk):
    assert calculate_cash_flow_risk(RevenueData(total_revenue=100.0), ExpenseData(total_expenses=expenses)) == risk


@pytest.mark.parametrize("count,risk", [(0, 80), (4, 80), (5, 60), (9, 60), (10, 40), (19, 40), (20, 20), (500, 20)])
def test_customer_concentration_steps(count, risk):
    assert calculate_customer_concentration_risk(CustomerData(total_customers=count)) == risk


@pytest.mark.parametrize("expenses,risk", [(95, 90), (85, 70), (75, 50), (65, 30), (55, 10), (0, 10)])
def test_expense_risk_steps(expenses, risk):
    assert calculate_expense_risk(ExpenseData(total_expenses=expenses), RevenueData(total_revenue=100.0)) == risk


def test_expense_risk_without_revenue():
    assert calculate_expense_risk(ExpenseData(total_expenses=500.0), RevenueData()) == 100


def test_revenue_risk_adds_product_and_recurring_penalties():
    products = ProductData(
        total_products=1,
        top_selling_products=[ProductSummary(name="Widget", revenue=1000.0, quantity=10)],
    )
    assert calculate_revenue_risk(RevenueData(total_revenue=1000.0), products) == 70
    assert calculate_revenue_risk(RevenueData(total_revenue=1000.0, recurring_revenue=400.0), products) == 55
    assert calculate_revenue_risk(RevenueData(total_revenue=1000.0, recurring_revenue=800.0), ProductData()) == 0


def test_revenue_risk_without_revenue_or_products():
    assert calculate_revenue_risk(RevenueData(), ProductData()) == 0


@pytest.mark.parametrize(
    "value,level",
    [(0, "low"), (24, "low"), (25, "medium"), (49, "medium"), (50, "high"), (74, "high"), (75, "critical"), (100, "critical")],
)
def test_determine_risk_level(value, level):
    assert determine_risk_level(RiskFactors(value, value, value, value)) == level


def test_single_customer_scenario(manual_transactions, as_of):
    """One retainer client: churn is unmeasurable and concentration is high"""
    adapter = ManualDataAdapter(manual_transactions, as_of=as_of)
    customers = adapter.get_customer_data()

    risk = assess_business_risks(
        adapter.get_revenue_data(),
        adapter.get_expense_data(),
        customers,
        adapter.get_product_data(),
    )

    assert customers.churn_rate == 0
    assert risk.factors == RiskFactors(
        cash_flow_risk=10,
        customer_concentration_risk=80,
        expense_risk=10,
        revenue_risk=0,
    )
    assert risk.level == "medium"
    assert risk.recommendations == ["Diversify customer base to reduce concentration risk"]


def test_single_transaction_single_customer(txn, as_of):
    """A customer seen once is left out of churn, even long after the payment"""
    transaction = txn("1", as_of - timedelta(days=120), 500.0, description="Payment from Acme Corp")
    adapter = ManualDataAdapter([transaction], as_of=as_of)
    customers = adapter.get_customer_data()

    assert customers.total_customers == 1
    assert customers.churn_rate == 0
    assert calculate_customer_concentration_risk(customers) == 80


def test_expenses_without_revenue_is_high_risk():
    risk = assess_business_risks(
        RevenueData(),
        ExpenseData(total_expenses=500.0, operating_expenses=500.0),
        CustomerData(),
        ProductData(),
    )

    assert risk.factors.expense_risk == 100
    assert risk.factors.cash_flow_risk == 90
    assert risk.level in ("high", "critical")
    assert risk.recommendations[0] == (
        "Immediate action needed: improve cash flow through cost reduction or revenue increase"
    )


def test_empty_snapshot_does_not_raise():
    risk = assess_business_risks(RevenueData(), ExpenseData(), CustomerData(), ProductData())

    assert risk.level in ("low", "medium", "high", "critical")
    for value in (
        risk.factors.cash_flow_risk,
        risk.factors.customer_concentration_risk,
        risk.factors.expense_risk,
        risk.factors.revenue_risk,
    ):
        assert 0 <= value <= 100
