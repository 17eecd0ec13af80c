"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from cashpilot_insights.domain.models import (
    AdaptiveInsightStrategy,
    FinancialAssessment,
    LineItem,
    PlatformOrder,
    SourceProfile,
    Transaction,
)


class TransactionSchema(BaseModel):
    """Transaction row mapped from the transaction store"""

    transaction_id: str = Field(..., min_length=1)
    date: date
    amount: float = Field(..., allow_inf_nan=False, description="Signed or unsigned; magnitude is used")
    currency: str = "USD"
    description: str = ""
    category: str = ""
    type: Literal["income", "expense", "transfer"]
    source: Literal["manual", "shopify", "quickbooks", "plaid"] = "manual"
    status: Literal["completed", "pending", "failed"] = "completed"

    def to_domain(self) -> Transaction:
        return Transaction(
            transaction_id=self.transaction_id,
            date=self.date,
            amount=abs(self.amount),
            type=self.type,
            description=self.description,
            category=self.category,
            source=self.source,
            status=self.status,
            currency=self.currency,
        )


class LineItemSchema(BaseModel):
    title: str
    price: float = Field(..., ge=0, allow_inf_nan=False)
    quantity: int = Field(..., ge=0)


class OrderSchema(BaseModel):
    """Platform order record supplied by the integration layer"""

    order_id: str
    customer_id: str
    created_at: datetime
    total_price: float = Field(..., ge=0, allow_inf_nan=False)
    line_items: List[LineItemSchema] = Field(default_factory=list)

    def to_domain(self) -> PlatformOrder:
        return PlatformOrder(
            order_id=self.order_id,
            customer_id=self.customer_id,
            created_at=self.created_at,
            total_price=self.total_price,
            line_items=tuple(LineItem(title=i.title, price=i.price, quantity=i.quantity) for i in self.line_items),
        )


class AssessmentRequest(BaseModel):
    """Request body for POST /v1/assessment and POST /v1/strategy"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    orders: List[OrderSchema] = Field(default_factory=list)
    as_of: Optional[date] = Field(None, description="Reference date for recency windows (default: today)")

    def domain_transactions(self) -> tuple[Transaction, ...]:
        return tuple(t.to_domain() for t in self.transactions)

    def domain_orders(self) -> tuple[PlatformOrder, ...]:
        return tuple(o.to_domain() for o in self.orders)


class AssessmentResponse(BaseModel):
    """Response for POST /v1/assessment"""

    request_id: str
    assessment: FinancialAssessment
    prompt_context: Dict[str, Any]


class StrategyResponse(BaseModel):
    """Response for POST /v1/strategy"""

    request_id: str
    profiles: List[SourceProfile]
    strategy: AdaptiveInsightStrategy
