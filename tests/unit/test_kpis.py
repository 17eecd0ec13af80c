"""Unit tests for dashboard KPIs and prompt context"""

from datetime import timedelta

import pytest

from cashpilot_insights.domain.adapters.manual import ManualDataAdapter
from cashpilot_insights.domain.kpis import build_prompt_context, calculate_cash_runway, calculate_kpis


def test_cash_runway_without_expenses_is_none():
    assert calculate_cash_runway(5000.0, 0.0) is None


def test_cash_runway_days():
    # $300/month burns $10/day
    assert calculate_cash_runway(1000.0, 300.0) == 100


def test_kpis_small_business_scenario(manual_transactions, as_of):
    adapter = ManualDataAdapter(manual_transactions, as_of=as_of)

    kpis = calculate_kpis(manual_transactions, adapter, as_of=as_of)

    # Last 30 days: one $1000 payment and one $400 expense
    assert kpis.net_cash_flow == 600.0
    assert kpis.profit_margin == pytest.approx(60.0)
    assert kpis.cash_runway_days is not None
    # Previous calendar month (May)
    assert kpis.monthly_recurring_revenue == 1000.0
    assert kpis.average_sale_value == 1000.0
    assert kpis.customer_lifetime_value == 3000.0
    assert kpis.churn_rate == 0.0
    assert kpis.active_customers == 1
    # Income is 86, 56 and 25 days old
    assert kpis.payment_cycle_days == 56
    assert kpis.accounts_receivable == 0.0
    assert kpis.accounts_payable == 0.0


def test_kpis_pending_receivables_and_payables(txn, as_of):
    transactions = [
        txn("1", as_of - timedelta(days=2), 250.0, status="pending", description="Client A"),
        txn("2", as_of - timedelta(days=2), 100.0, type="expense", status="pending", category="Rent"),
        txn("3", as_of - timedelta(days=60), 900.0, status="pending", description="Client B"),
    ]
    adapter = ManualDataAdapter(transactions, as_of=as_of)

    kpis = calculate_kpis(transactions, adapter, as_of=as_of)

    assert kpis.accounts_receivable == 250.0
    assert kpis.accounts_payable == 100.0


def test_kpis_empty_snapshot(as_of):
    kpis = calculate_kpis([], ManualDataAdapter([], as_of=as_of), as_of=as_of)

    assert kpis.net_cash_flow == 0
    assert kpis.cash_runway_days is None
    assert kpis.profit_margin == 0
    assert kpis.payment_cycle_days == 0


def test_prompt_context(manual_transactions):
    context = build_prompt_context(manual_transactions)

    assert context["income"] == 3000.0
    assert context["expenses"] == 800.0
    assert context["net"] == 2200.0
    assert context["savings_rate"] == pytest.approx(2200 / 3000 * 100)
    assert context["transaction_count"] == 5
    assert [t["amount"] for t in context["top_transactions"]] == [1000.0, 1000.0, 1000.0, 400.0, 400.0]
    assert context["top_transactions"][0]["date"] == "2024-04-05"


def test_prompt_context_savings_rate_without_income(txn, as_of):
    context = build_prompt_context([txn("1", as_of, 500.0, type="expense")])

    assert context["income"] == 0
    assert context["net"] == -500.0
    assert context["savings_rate"] == 0
