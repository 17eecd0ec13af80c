"""Grouping and merge helpers shared by every data adapter"""

import math
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Tuple

from cashpilot_insights.domain.models import ProductData, ProductPerformance, ProductSummary, Transaction
from cashpilot_insights.utils.date_utils import period_key

TOP_PRODUCT_LIMIT = 10


def safe_divide(numerator: float, denominator: float) -> float:
    """x / y, with 0 instead of NaN/Infinity when y is 0 or the result is not finite"""
    if denominator == 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def total_amount(transactions: Iterable[Transaction]) -> float:
    return sum(t.amount for t in transactions)


def group_by_period(transactions: Iterable[Transaction]) -> Dict[str, float]:
    """Sum amounts per calendar month, chronological key order"""
    periods: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        periods[period_key(txn.date)] += txn.amount
    return dict(sorted(periods.items()))


def group_by_category(transactions: Iterable[Transaction]) -> Dict[str, float]:
    categories: Dict[str, float] = defaultdict(float)
    for txn in transactions:
        categories[txn.category or "Uncategorized"] += txn.amount
    return dict(categories)


def merge_additive(maps: Iterable[Mapping[str, float]], sort_keys: bool = False) -> Dict[str, float]:
    """Additive union on key"""
    merged: Dict[str, float] = defaultdict(float)
    for mapping in maps:
        for key, value in mapping.items():
            merged[key] += value
    if sort_keys:
        return dict(sorted(merged.items()))
    return dict(merged)


def build_product_data(products: Mapping[str, Tuple[float, int]]) -> ProductData:
    """
    Build ProductData from per-name (revenue, quantity) totals.

    Ties on revenue are broken by name so repeated calls give identical output.
    """
    ranked: List[ProductSummary] = sorted(
        (ProductSummary(name=name, revenue=revenue, quantity=quantity) for name, (revenue, quantity) in products.items()),
        key=lambda p: (-p.revenue, p.name),
    )
    return ProductData(
        total_products=len(ranked),
        top_selling_products=ranked[:TOP_PRODUCT_LIMIT],
        # Margin needs cost data that no source provides
        product_performance={
            p.name: ProductPerformance(revenue=p.revenue, quantity=p.quantity, margin=0.0) for p in ranked
        },
    )
