"""Pytest fixtures for testing"""

from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from cashpilot_insights.api.main import create_app
from cashpilot_insights.domain.models import LineItem, PlatformOrder, Transaction

AS_OF = date(2024, 6, 30)


def make_transaction(
    transaction_id: str,
    day: date,
    amount: float,
    type: str = "income",
    description: str = "",
    category: str = "",
    source: str = "manual",
    status: str = "completed",
) -> Transaction:
    return Transaction(
        transaction_id=transaction_id,
        date=day,
        amount=amount,
        type=type,
        description=description,
        category=category,
        source=source,
        status=status,
    )


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def txn():
    """Transaction factory with manual-entry defaults"""
    return make_transaction


@pytest.fixture
def manual_transactions() -> list[Transaction]:
    """One retainer client paying $1000 monthly, two $400 office supply runs"""
    return [
        make_transaction("inc_1", date(2024, 4, 5), 1000.0, description="Client A - Jan", category="Consulting"),
        make_transaction("inc_2", date(2024, 5, 5), 1000.0, description="Client A - Feb", category="Consulting"),
        make_transaction("inc_3", date(2024, 6, 5), 1000.0, description="Client A - Mar", category="Consulting"),
        make_transaction(
            "exp_1", date(2024, 4, 20), 400.0, type="expense", description="Office Supplies", category="Office Supplies"
        ),
        make_transaction(
            "exp_2", date(2024, 6, 20), 400.0, type="expense", description="Office Supplies", category="Office Supplies"
        ),
    ]


@pytest.fixture
def platform_transactions() -> list[Transaction]:
    """Storefront payouts: one subscription, one order, one refund"""
    return [
        make_transaction(
            "shp_1",
            AS_OF - timedelta(days=5),
            200.0,
            description="Subscription box - Customer 1",
            category="Sales",
            source="shopify",
        ),
        make_transaction(
            "shp_2",
            AS_OF - timedelta(days=100),
            100.0,
            description="Order 1002 - Customer 2",
            category="Sales",
            source="shopify",
        ),
        make_transaction(
            "shp_3",
            AS_OF - timedelta(days=3),
            50.0,
            type="expense",
            description="Refund order 1002",
            category="Refunds",
            source="shopify",
        ),
    ]


@pytest.fixture
def platform_orders() -> list[PlatformOrder]:
    """Customer c1 ordered recently and long ago; c2 only more than 90 days ago"""
    base = datetime(AS_OF.year, AS_OF.month, AS_OF.day, 12, 0)
    return [
        PlatformOrder(
            order_id="o1",
            customer_id="c1",
            created_at=base - timedelta(days=5),
            total_price=200.0,
            line_items=(LineItem("Widget", 50.0, 2), LineItem("Gadget", 100.0, 1)),
        ),
        PlatformOrder(
            order_id="o2",
            customer_id="c2",
            created_at=base - timedelta(days=100),
            total_price=100.0,
            line_items=(LineItem("Widget", 50.0, 2),),
        ),
        PlatformOrder(
            order_id="o3",
            customer_id="c1",
            created_at=base - timedelta(days=120),
            total_price=80.0,
            line_items=(LineItem("Gizmo", 80.0, 1),),
        ),
    ]
