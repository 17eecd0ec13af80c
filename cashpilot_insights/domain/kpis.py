"""Dashboard KPIs and the numeric context handed to insight generation"""

from datetime import date
from typing import Any, Dict, List, Sequence

from cashpilot_insights.config import settings
from cashpilot_insights.domain.adapters.aggregation import safe_divide, total_amount
from cashpilot_insights.domain.adapters.base import DataAdapter
from cashpilot_insights.domain.models import KPISummary, Transaction
from cashpilot_insights.utils.date_utils import days_before, previous_month_range, resolve_as_of

PROMPT_TOP_TRANSACTIONS = 5


def _in_window(transactions: Sequence[Transaction], start: date, end: date) -> List[Transaction]:
    return [t for t in transactions if start <= t.date <= end]


def calculate_cash_runway(net_cash: float, monthly_expenses: float) -> int | None:
    """Days the current net position covers at the current burn rate"""
    if monthly_expenses <= 0:
        return None
    daily_expenses = monthly_expenses / 30
    return int(net_cash // daily_expenses)


def calculate_payment_cycle(transactions: Sequence[Transaction], as_of: date) -> int:
    """
    Average age in days of income transactions.

    Approximation: no invoice dates are available, so this measures how old
    the received income is rather than how long invoices took to be paid.
    """
    income = [t for t in transactions if t.type == "income"]
    ages = [(as_of - t.date).days for t in income]
    return round(safe_divide(sum(ages), len(ages)))


def calculate_kpis(
    transactions: Sequence[Transaction],
    adapter: DataAdapter,
    as_of: date | None = None,
) -> KPISummary:
    as_of = resolve_as_of(as_of)
    window_start = days_before(as_of, settings.recent_window_days)
    recent = _in_window(transactions, window_start, as_of)

    recent_income = total_amount(t for t in recent if t.type == "income")
    recent_expenses = total_amount(t for t in recent if t.type == "expense")
    net_cash_flow = recent_income - recent_expenses

    receivable = total_amount(t for t in recent if t.type == "income" and t.status == "pending")
    payable = total_amount(t for t in recent if t.type == "expense" and t.status == "pending")

    last_month_start, this_month_start = previous_month_range(as_of)
    monthly_recurring_revenue = total_amount(
        t for t in transactions if t.type == "income" and last_month_start <= t.date < this_month_start
    )

    income = [t for t in transactions if t.type == "income"]
    customers = adapter.get_customer_data()

    return KPISummary(
        accounts_receivable=receivable,
        accounts_payable=payable,
        net_cash_flow=net_cash_flow,
        cash_runway_days=calculate_cash_runway(net_cash_flow, recent_expenses),
        monthly_recurring_revenue=monthly_recurring_revenue,
        customer_lifetime_value=customers.customer_lifetime_value,
        churn_rate=customers.churn_rate * 100,
        profit_margin=safe_divide(net_cash_flow, recent_income) * 100,
        average_sale_value=safe_divide(total_amount(income), len(income)),
        payment_cycle_days=calculate_payment_cycle(transactions, as_of),
        active_customers=customers.active_customers,
    )


def build_prompt_context(transactions: Sequence[Transaction]) -> Dict[str, Any]:
    """
    Numeric fields embedded into insight-generation prompts.

    Only numbers and raw transaction fields; wording the insight is the
    prompt collaborator's job.
    """
    income = total_amount(t for t in transactions if t.type == "income")
    expenses = total_amount(t for t in transactions if t.type == "expense")
    top = sorted(transactions, key=lambda t: (-t.amount, t.date, t.transaction_id))[:PROMPT_TOP_TRANSACTIONS]

    return {
        "income": income,
        "expenses": expenses,
        "net": income - expenses,
        "savings_rate": safe_divide(income - expenses, income) * 100,
        "transaction_count": len(transactions),
        "top_transactions": [
            {
                "date": t.date.isoformat(),
                "description": t.description,
                "category": t.category,
                "type": t.type,
                "amount": t.amount,
            }
            for t in top
        ],
    }
