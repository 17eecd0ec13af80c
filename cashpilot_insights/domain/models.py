"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Literal, Optional, Tuple

TransactionType = Literal["income", "expense", "transfer"]
TransactionStatus = Literal["completed", "pending", "failed"]
SourceTag = Literal["manual", "shopify", "quickbooks", "plaid"]
DataSource = Literal["manual", "shopify", "quickbooks", "plaid", "combined"]
TrendDirection = Literal["increasing", "decreasing", "stable"]
RiskLevel = Literal["low", "medium", "high", "critical"]
ConfidenceLevel = Literal["high", "medium", "low"]
Grade = Literal["A", "B", "C", "D", "F"]


@dataclass(frozen=True)
class Transaction:
    """Transaction record from the external transaction store"""

    transaction_id: str
    date: date
    amount: float  # magnitude; direction comes from `type`
    type: TransactionType
    description: str = ""
    category: str = ""
    source: SourceTag = "manual"
    status: TransactionStatus = "completed"
    currency: str = "USD"


@dataclass(frozen=True)
class LineItem:
    """Single product line on a platform order"""

    title: str
    price: float
    quantity: int


@dataclass(frozen=True)
class PlatformOrder:
    """Structured order record supplied by a connected commerce platform"""

    order_id: str
    customer_id: str
    created_at: datetime
    total_price: float
    line_items: Tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class RevenueData:
    total_revenue: float = 0.0
    recurring_revenue: float = 0.0
    one_time_revenue: float = 0.0
    average_order_value: float = 0.0
    revenue_by_period: Dict[str, float] = field(default_factory=dict)
    revenue_by_category: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ExpenseData:
    total_expenses: float = 0.0
    operating_expenses: float = 0.0
    cost_of_goods: float = 0.0
    expenses_by_category: Dict[str, float] = field(default_factory=dict)
    expenses_by_period: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class CustomerData:
    total_customers: int = 0
    active_customers: int = 0
    new_customers: int = 0
    customer_lifetime_value: float = 0.0
    churn_rate: float = 0.0  # fraction in [0, 1]
    customers_by_period: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ProductSummary:
    name: str
    revenue: float
    quantity: int


@dataclass(frozen=True)
class ProductPerformance:
    revenue: float
    quantity: int
    margin: float = 0.0


@dataclass(frozen=True)
class ProductData:
    total_products: int = 0
    top_selling_products: List[ProductSummary] = field(default_factory=list)
    product_performance: Dict[str, ProductPerformance] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryScores:
    revenue: int
    expenses: int
    cash_flow: int
    customers: int
    operations: int


@dataclass(frozen=True)
class HealthFactors:
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FinancialHealthScore:
    """Weighted 0-100 composite of five category sub-scores"""

    overall: int
    grade: Grade
    categories: CategoryScores
    factors: HealthFactors
    last_updated: datetime


@dataclass(frozen=True)
class Trends:
    revenue: TrendDirection
    expenses: TrendDirection
    cash_flow: TrendDirection
    customers: TrendDirection


@dataclass(frozen=True)
class TrendAnalysis:
    period: str
    trends: Trends
    confidence: int
    insights: List[str]


@dataclass(frozen=True)
class RiskFactors:
    """Four independent risk factors, 0-100, higher is worse"""

    cash_flow_risk: int
    customer_concentration_risk: int
    expense_risk: int
    revenue_risk: int


@dataclass(frozen=True)
class RiskAssessment:
    level: RiskLevel
    factors: RiskFactors
    recommendations: List[str]


@dataclass(frozen=True)
class SourceProfile:
    """Data-quality profile of one observed source"""

    source: DataSource
    data_quality: float
    coverage: float
    completeness: float
    recency: float
    accuracy: float
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AdaptiveInsightStrategy:
    primary_source: DataSource
    secondary_sources: List[DataSource]
    insight_types: List[str]
    confidence_level: ConfidenceLevel
    limitations: List[str]
    recommendations: List[str]


@dataclass(frozen=True)
class KPISummary:
    """Headline dashboard KPIs derived from the snapshot"""

    accounts_receivable: float
    accounts_payable: float
    net_cash_flow: float
    cash_runway_days: Optional[int]  # None when there are no expenses to burn
    monthly_recurring_revenue: float
    customer_lifetime_value: float
    churn_rate: float  # percentage
    profit_margin: float
    average_sale_value: float
    payment_cycle_days: int
    active_customers: int


@dataclass(frozen=True)
class FinancialAssessment:
    """Result bundle handed to API, prompt and persistence collaborators"""

    data_source: DataSource
    data_available: bool
    revenue: RevenueData
    expenses: ExpenseData
    customers: CustomerData
    products: ProductData
    health_score: FinancialHealthScore
    trends: TrendAnalysis
    risk: RiskAssessment
    profiles: List[SourceProfile]
    strategy: AdaptiveInsightStrategy
    kpis: KPISummary
