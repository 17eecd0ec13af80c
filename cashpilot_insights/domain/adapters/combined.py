"""Combined data adapter - one view over several source adapters"""

from typing import Dict, List, Sequence, Tuple

from cashpilot_insights.domain.adapters.aggregation import build_product_data, merge_additive, safe_divide
from cashpilot_insights.domain.adapters.base import DataAdapter
from cashpilot_insights.domain.models import (
    CustomerData,
    DataSource,
    ExpenseData,
    ProductData,
    RevenueData,
    Transaction,
)


class CombinedDataAdapter(DataAdapter):
    """
    Composite over an ordered list of adapters.

    Totals and per-period/per-category maps add up field by field. Two values
    are deliberately not simple sums:

    - average order value is recomputed from combined revenue and the combined
      income transaction count, not averaged across adapters;
    - total customers is the max across adapters. No source offers an identity
      key that would allow real cross-source deduplication (manual entries have
      no customer id), so this is an approximation that undercounts disjoint
      customer bases and never double counts overlapping ones.
    """

    def __init__(self, adapters: Sequence[DataAdapter]):
        super().__init__()
        self.adapters: List[DataAdapter] = list(adapters)

    @property
    def source(self) -> DataSource:
        return "combined"

    def get_transactions(self) -> List[Transaction]:
        return [t for adapter in self.adapters for t in adapter.get_transactions()]

    def is_data_available(self) -> bool:
        return any(adapter.is_data_available() for adapter in self.adapters)

    def get_revenue_data(self) -> RevenueData:
        parts = [adapter.get_revenue_data() for adapter in self.adapters]
        total_revenue = sum(p.total_revenue for p in parts)
        income_count = sum(adapter.income_transaction_count() for adapter in self.adapters)

        return RevenueData(
            total_revenue=total_revenue,
            recurring_revenue=sum(p.recurring_revenue for p in parts),
            one_time_revenue=sum(p.one_time_revenue for p in parts),
            average_order_value=safe_divide(total_revenue, income_count),
            revenue_by_period=merge_additive((p.revenue_by_period for p in parts), sort_keys=True),
            revenue_by_category=merge_additive(p.revenue_by_category for p in parts),
        )

    def get_expense_data(self) -> ExpenseData:
        parts = [adapter.get_expense_data() for adapter in self.adapters]

        return ExpenseData(
            total_expenses=sum(p.total_expenses for p in parts),
            operating_expenses=sum(p.operating_expenses for p in parts),
            cost_of_goods=sum(p.cost_of_goods for p in parts),
            expenses_by_category=merge_additive(p.expenses_by_category for p in parts),
            expenses_by_period=merge_additive((p.expenses_by_period for p in parts), sort_keys=True),
        )

    def get_customer_data(self) -> CustomerData:
        parts = [adapter.get_customer_data() for adapter in self.adapters]
        if not parts:
            return CustomerData()

        total_customers = max(p.total_customers for p in parts)
        summed_customers = sum(p.total_customers for p in parts)
        churned = sum(p.churn_rate * p.total_customers for p in parts)
        total_revenue = self.get_revenue_data().total_revenue
        customers_by_period = merge_additive((p.customers_by_period for p in parts), sort_keys=True)

        return CustomerData(
            total_customers=total_customers,
            active_customers=sum(p.active_customers for p in parts),
            new_customers=sum(p.new_customers for p in parts),
            customer_lifetime_value=safe_divide(total_revenue, total_customers),
            churn_rate=safe_divide(churned, summed_customers),
            customers_by_period={period: int(count) for period, count in customers_by_period.items()},
        )

    def get_product_data(self) -> ProductData:
        products: Dict[str, Tuple[float, int]] = {}
        for adapter in self.adapters:
            for name, performance in adapter.get_product_data().product_performance.items():
                revenue, quantity = products.get(name, (0.0, 0))
                products[name] = (revenue + performance.revenue, quantity + performance.quantity)
        return build_product_data(products)
