"""Platform data adapter - structured order data from a connected commerce platform"""

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Set, Tuple

from cashpilot_insights.config import settings
from cashpilot_insights.domain.adapters.aggregation import (
    build_product_data,
    group_by_category,
    group_by_period,
    safe_divide,
    total_amount,
)
from cashpilot_insights.domain.adapters.base import DataAdapter
from cashpilot_insights.domain.models import (
    CustomerData,
    DataSource,
    ExpenseData,
    PlatformOrder,
    ProductData,
    RevenueData,
    Transaction,
)
from cashpilot_insights.utils.date_utils import days_before, period_key, resolve_as_of, to_date

PLATFORM_SOURCES = frozenset({"shopify"})
RECURRING_KEYWORD = "subscription"


class PlatformDataAdapter(DataAdapter):
    """
    Adapter for a connected commerce platform (Shopify-style).

    Revenue comes from the platform's transactions; customers and products
    come from order records, which carry real customer ids and line items.
    Platforms report refunds but not general operating costs, so expense data
    is refunds only, with the operating/COGS split left at zero.
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        orders: Iterable[PlatformOrder] = (),
        source: str = "shopify",
        as_of: date | None = None,
    ):
        super().__init__()
        self._source = source
        self.transactions: List[Transaction] = [t for t in transactions if t.source == source]
        self.orders: List[PlatformOrder] = list(orders)
        self.as_of = resolve_as_of(as_of)

    @property
    def source(self) -> DataSource:
        return self._source

    def get_transactions(self) -> List[Transaction]:
        return list(self.transactions)

    def is_data_available(self) -> bool:
        return len(self.transactions) > 0 or len(self.orders) > 0

    def get_revenue_data(self) -> RevenueData:
        income = [t for t in self.transactions if t.type == "income"]
        total_revenue = total_amount(income)
        # Platform descriptions are structured, so a keyword match is reliable here
        recurring_revenue = total_amount(t for t in income if RECURRING_KEYWORD in (t.description or "").lower())

        return RevenueData(
            total_revenue=total_revenue,
            recurring_revenue=recurring_revenue,
            one_time_revenue=total_revenue - recurring_revenue,
            average_order_value=safe_divide(total_revenue, len(income)),
            revenue_by_period=group_by_period(income),
            revenue_by_category=group_by_category(income),
        )

    def get_expense_data(self) -> ExpenseData:
        refunds = [t for t in self.transactions if t.type == "expense"]

        return ExpenseData(
            total_expenses=total_amount(refunds),
            operating_expenses=0.0,  # not reported by the platform
            cost_of_goods=0.0,  # needs manual cost entry
            expenses_by_category=group_by_category(refunds),
            expenses_by_period=group_by_period(refunds),
        )

    def get_customer_data(self) -> CustomerData:
        order_dates: Dict[str, List[date]] = defaultdict(list)
        spend: Dict[str, float] = defaultdict(float)
        customers_by_period: Dict[str, Set[str]] = defaultdict(set)

        for order in self.orders:
            if not order.customer_id:
                continue
            day = to_date(order.created_at)
            order_dates[order.customer_id].append(day)
            spend[order.customer_id] += order.total_price
            customers_by_period[period_key(day)].add(order.customer_id)

        recent_cutoff = days_before(self.as_of, settings.recent_window_days)
        churn_cutoff = days_before(self.as_of, settings.churn_window_days)

        total = len(order_dates)
        active = sum(1 for dates in order_dates.values() if max(dates) >= recent_cutoff)
        new = sum(1 for dates in order_dates.values() if min(dates) >= recent_cutoff)
        churned = sum(1 for dates in order_dates.values() if max(dates) < churn_cutoff)

        return CustomerData(
            total_customers=total,
            active_customers=active,
            new_customers=new,
            customer_lifetime_value=safe_divide(sum(spend.values()), total),
            churn_rate=safe_divide(churned, total),
            customers_by_period={period: len(ids) for period, ids in sorted(customers_by_period.items())},
        )

    def get_product_data(self) -> ProductData:
        products: Dict[str, Tuple[float, int]] = {}
        for order in self.orders:
            for item in order.line_items:
                if not item.title:
                    continue
                revenue, quantity = products.get(item.title, (0.0, 0))
                products[item.title] = (revenue + item.price * item.quantity, quantity + item.quantity)
        return build_product_data(products)
