"""Adapter selection for a transaction snapshot"""

import logging
from datetime import date
from typing import Iterable, List, Sequence

from cashpilot_insights.domain.adapters.base import DataAdapter
from cashpilot_insights.domain.adapters.combined import CombinedDataAdapter
from cashpilot_insights.domain.adapters.manual import ManualDataAdapter
from cashpilot_insights.domain.adapters.platform import PLATFORM_SOURCES, PlatformDataAdapter
from cashpilot_insights.domain.models import PlatformOrder, Transaction

logger = logging.getLogger(__name__)

# Sources without a dedicated adapter are aggregated by transaction type, the
# same way manual entries are
TYPE_AGGREGATED_SOURCES = ("manual", "quickbooks", "plaid")


def create_data_adapter(
    transactions: Sequence[Transaction],
    orders: Iterable[PlatformOrder] = (),
    as_of: date | None = None,
) -> DataAdapter:
    """
    Pick the adapter for a snapshot.

    - platform and other data -> Combined(Platform, Manual)
    - platform data only -> Platform
    - anything else, including an empty snapshot -> Manual
    """
    orders = list(orders)
    adapters: List[DataAdapter] = []

    if orders or any(t.source in PLATFORM_SOURCES for t in transactions):
        adapters.append(PlatformDataAdapter(transactions, orders, as_of=as_of))

    manual = ManualDataAdapter(transactions, as_of=as_of, sources=TYPE_AGGREGATED_SOURCES)
    if manual.is_data_available() or not adapters:
        adapters.append(manual)

    if len(adapters) == 1:
        adapter = adapters[0]
    else:
        adapter = CombinedDataAdapter(adapters)

    logger.debug(
        "Selected data adapter",
        extra={"adapter": adapter.source, "transaction_count": len(transactions), "order_count": len(orders)},
    )
    return adapter
