"""Manual data adapter - heuristic aggregation over user-entered transactions"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Set, Tuple

from cashpilot_insights.config import settings
from cashpilot_insights.domain.adapters.aggregation import (
    build_product_data,
    group_by_category,
    group_by_period,
    safe_divide,
    total_amount,
)
from cashpilot_insights.domain.adapters.base import DataAdapter
from cashpilot_insights.domain.adapters.extraction import NameExtractor, customer_extractor, product_extractor
from cashpilot_insights.domain.models import (
    CustomerData,
    DataSource,
    ExpenseData,
    ProductData,
    RevenueData,
    Transaction,
)
from cashpilot_insights.utils.date_utils import days_before, period_key, resolve_as_of

MANUAL_SOURCES = ("manual",)
COST_OF_GOODS_CATEGORIES = frozenset({"Product Sales", "Inventory", "Materials", "Cost of Goods"})
RECURRING_AMOUNT_TOLERANCE = 0.01
RECURRING_MIN_OCCURRENCES = 3  # an amount seen more than twice


class ManualDataAdapter(DataAdapter):
    """
    Adapter for users who enter transactions by hand.

    Nothing in a manual entry is structured beyond amount, type, date and
    category, so recurring revenue, cost of goods, customers and products are
    all estimated:

    - Recurring revenue: income amounts (within 1 cent) that occur more than
      twice are treated as recurring. A heuristic, not ground truth.
    - Cost of goods: expenses whose category is in COST_OF_GOODS_CATEGORIES.
    - Customers/products: names pulled from descriptions by pluggable
      extractors; unmatched transactions count toward totals only.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        as_of: date | None = None,
        sources: Iterable[str] = MANUAL_SOURCES,
        customer_names: Optional[NameExtractor] = None,
        product_names: Optional[NameExtractor] = None,
    ):
        super().__init__()
        self.sources = frozenset(sources)
        self.transactions: List[Transaction] = [t for t in transactions if t.source in self.sources]
        self.as_of = resolve_as_of(as_of)
        self.customer_names = customer_names or customer_extractor()
        self.product_names = product_names or product_extractor()

    @property
    def source(self) -> DataSource:
        return "manual"

    def get_transactions(self) -> List[Transaction]:
        return list(self.transactions)

    def is_data_available(self) -> bool:
        return len(self.transactions) > 0

    def get_revenue_data(self) -> RevenueData:
        income = self._income()
        total_revenue = total_amount(income)
        recurring_revenue = self._estimate_recurring_revenue(income)

        return RevenueData(
            total_revenue=total_revenue,
            recurring_revenue=recurring_revenue,
            one_time_revenue=total_revenue - recurring_revenue,
            average_order_value=safe_divide(total_revenue, len(income)),
            revenue_by_period=group_by_period(income),
            revenue_by_category=group_by_category(income),
        )

    def get_expense_data(self) -> ExpenseData:
        expenses = [t for t in self.transactions if t.type == "expense"]
        total_expenses = total_amount(expenses)
        cost_of_goods = total_amount(t for t in expenses if t.category in COST_OF_GOODS_CATEGORIES)

        return ExpenseData(
            total_expenses=total_expenses,
            operating_expenses=total_expenses - cost_of_goods,
            cost_of_goods=cost_of_goods,
            expenses_by_category=group_by_category(expenses),
            expenses_by_period=group_by_period(expenses),
        )

    def get_customer_data(self) -> CustomerData:
        history = self._customer_history()
        recent_cutoff = days_before(self.as_of, settings.recent_window_days)
        churn_cutoff = days_before(self.as_of, settings.churn_window_days)

        active = sum(1 for dates in history.values() if max(dates) >= recent_cutoff)
        new = sum(1 for dates in history.values() if min(dates) >= recent_cutoff)

        # Customers seen once say nothing about retention; keep them out of the denominator
        repeat = [dates for dates in history.values() if len(dates) > 1]
        churned = sum(1 for dates in repeat if max(dates) < churn_cutoff)

        customers_by_period: Dict[str, Set[str]] = defaultdict(set)
        for name, dates in history.items():
            for day in dates:
                customers_by_period[period_key(day)].add(name)

        total_revenue = total_amount(self._income())
        return CustomerData(
            total_customers=len(history),
            active_customers=active,
            new_customers=new,
            customer_lifetime_value=safe_divide(total_revenue, len(history)),
            churn_rate=safe_divide(churned, len(repeat)),
            customers_by_period={period: len(names) for period, names in sorted(customers_by_period.items())},
        )

    def get_product_data(self) -> ProductData:
        products: Dict[str, Tuple[float, int]] = {}
        for txn in self._income():
            name = self.product_names.extract(txn.description)
            if not name:
                continue
            revenue, quantity = products.get(name, (0.0, 0))
            products[name] = (revenue + txn.amount, quantity + 1)
        return build_product_data(products)

    def _income(self) -> List[Transaction]:
        return [t for t in self.transactions if t.type == "income"]

    def _customer_history(self) -> Dict[str, List[date]]:
        """Income dates per extracted customer name"""
        history: Dict[str, List[date]] = defaultdict(list)
        for txn in self._income():
            name = self.customer_names.extract(txn.description)
            if name:
                history[name].append(txn.date)
        return dict(history)

    @staticmethod
    def _estimate_recurring_revenue(income: List[Transaction]) -> float:
        amounts = [t.amount for t in income]
        recurring = 0.0
        for amount in sorted(set(amounts)):
            matches = [a for a in amounts if abs(a - amount) < RECURRING_AMOUNT_TOLERANCE]
            if len(matches) >= RECURRING_MIN_OCCURRENCES:
                # Count each transaction once even when nearby distinct amounts overlap
                recurring += sum(a for a in amounts if a == amount)
        return recurring
