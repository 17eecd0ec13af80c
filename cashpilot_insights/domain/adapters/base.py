"""Base adapter class for all transaction sources."""

import logging
from abc import ABC, abstractmethod
from typing import List

from cashpilot_insights.domain.models import (
    CustomerData,
    DataSource,
    ExpenseData,
    ProductData,
    RevenueData,
    Transaction,
)


class DataAdapter(ABC):
    """
    Base class for data source adapters.

    Each adapter turns the transactions (and any structured records) of one
    kind of source into the four canonical aggregates, so scoring never needs
    to know where the numbers came from. Adapters are total: missing optional
    fields never raise, and an empty snapshot yields all-zero aggregates.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"cashpilot_insights.adapters.{self.__class__.__name__}")

    @property
    @abstractmethod
    def source(self) -> DataSource:
        """Return source identifier (manual, shopify, combined...)."""

    @abstractmethod
    def get_transactions(self) -> List[Transaction]:
        """Transactions this adapter aggregates over."""

    @abstractmethod
    def get_revenue_data(self) -> RevenueData:
        pass

    @abstractmethod
    def get_expense_data(self) -> ExpenseData:
        pass

    @abstractmethod
    def get_customer_data(self) -> CustomerData:
        pass

    @abstractmethod
    def get_product_data(self) -> ProductData:
        pass

    @abstractmethod
    def is_data_available(self) -> bool:
        """True iff at least one record attributable to this source exists."""

    def income_transaction_count(self) -> int:
        return sum(1 for t in self.get_transactions() if t.type == "income")
