"""
Calibration constants for scoring, trends, risk and strategy selection.

None of these boundaries is statistically derived; they are product
calibrations. Keeping them here lets a recalibration be reviewed as a diff of
numbers without touching the algorithms that consume them.
"""

from typing import Dict, List, Tuple

SCORE_MIN = 0
SCORE_MAX = 100

# Overall health score weights (must sum to 1.0)
CATEGORY_WEIGHTS: Dict[str, float] = {
    "revenue": 0.25,
    "expenses": 0.25,
    "cash_flow": 0.25,
    "customers": 0.15,
    "operations": 0.10,
}

# (minimum overall score, grade), checked top-down
GRADE_BOUNDARIES: List[Tuple[int, str]] = [
    (80, "A"),
    (60, "B"),
    (40, "C"),
    (20, "D"),
]
FALLBACK_GRADE = "F"

CATEGORY_BASELINE = 100

# Period comparison
TREND_WINDOW = 3  # periods per side
MIN_TREND_PERIODS = 2
CONSISTENCY_WINDOW = 6  # most recent aligned months checked for positive cash flow
MIN_CONSISTENCY_PERIODS = 3

# Revenue score
REVENUE_GROWTH_STRONG = 10.0  # percent
REVENUE_DECLINE_STRONG = -10.0
RECURRING_SHARE_HIGH = 70.0
RECURRING_SHARE_GOOD = 50.0
RECURRING_SHARE_LOW = 30.0
REVENUE_CATEGORIES_DIVERSE = 3

# Expense score
EXPENSE_RATIO_EXCELLENT = 50.0
EXPENSE_RATIO_GOOD = 70.0
EXPENSE_RATIO_HIGH = 80.0
EXPENSE_RATIO_CRITICAL = 90.0
EXPENSE_CATEGORIES_WELL_TRACKED = 5
EXPENSE_CATEGORIES_POOR = 2
OPERATING_SHARE_LEAN = 60.0
OPERATING_SHARE_HEAVY = 80.0

# Cash-flow score
MARGIN_EXCELLENT = 30.0
MARGIN_GOOD = 20.0
MARGIN_FAIR = 10.0
MARGIN_THIN = 5.0
CONSISTENCY_HIGH = 0.8
CONSISTENCY_FAIR = 0.6
CONSISTENCY_LOW = 0.4

# Customer score
CUSTOMER_GROWTH_STRONG = 20.0
CUSTOMER_GROWTH_GOOD = 10.0
CUSTOMER_GROWTH_WEAK = 5.0
LTV_HIGH = 1000.0
LTV_GOOD = 500.0
LTV_LOW = 100.0
CHURN_EXCELLENT = 5.0  # percent
CHURN_GOOD = 10.0
CHURN_ELEVATED = 15.0
CHURN_SEVERE = 20.0

# Operations score
PRODUCTS_DIVERSE = 5
PRODUCTS_FAIR = 3
TOP_PRODUCT_DIVERSIFIED = 30.0
TOP_PRODUCT_CONCENTRATED = 70.0

# Qualitative factors
EXPENSE_RATIO_EFFICIENT = 60.0

# Trends
TREND_CHANGE = 5.0  # percent
CASH_FLOW_TREND_CHANGE = 10.0
# (transaction count upper bound, confidence)
TREND_CONFIDENCE_STEPS: List[Tuple[int, int]] = [
    (10, 30),
    (50, 60),
    (100, 80),
]
TREND_CONFIDENCE_MAX = 90

# Risk
NEGATIVE_CASH_FLOW_RISK = 90
# (margin upper bound in percent, risk)
CASH_FLOW_RISK_STEPS: List[Tuple[float, int]] = [(5.0, 70), (10.0, 50), (20.0, 30)]
CASH_FLOW_RISK_FLOOR = 10
# (customer count upper bound, risk)
CONCENTRATION_RISK_STEPS: List[Tuple[int, int]] = [(5, 80), (10, 60), (20, 40)]
CONCENTRATION_RISK_FLOOR = 20
NO_REVENUE_EXPENSE_RISK = 100
# (expense ratio lower bound in percent, risk)
EXPENSE_RISK_STEPS: List[Tuple[float, int]] = [(90.0, 90), (80.0, 70), (70.0, 50), (60.0, 30)]
EXPENSE_RISK_FLOOR = 10
TOP_PRODUCT_SHARE_SEVERE = 70.0
TOP_PRODUCT_SHARE_ELEVATED = 50.0
TOP_PRODUCT_SEVERE_RISK = 40
TOP_PRODUCT_ELEVATED_RISK = 20
RECURRING_SEVERE_RISK = 30
RECURRING_ELEVATED_RISK = 15
# (average risk upper bound, level)
RISK_LEVEL_STEPS: List[Tuple[float, str]] = [(25.0, "low"), (50.0, "medium"), (75.0, "high")]
CASH_FLOW_RISK_ALERT = 70
CONCENTRATION_RISK_ALERT = 60
EXPENSE_RISK_ALERT = 70
REVENUE_RISK_ALERT = 60

# Source profiling
MAX_PLAUSIBLE_AMOUNT = 1_000_000
MIN_DESCRIPTION_LENGTH = 3
UNCATEGORIZED = "Uncategorized"

# Strategy selection weights
PRIMARY_QUALITY_WEIGHT = 0.4
PRIMARY_COVERAGE_WEIGHT = 0.3
PRIMARY_COMPLETENESS_WEIGHT = 0.3
CONFIDENCE_HIGH = 80.0
CONFIDENCE_MEDIUM = 60.0
LIMITED_COVERAGE = 50.0
LOW_QUALITY = 70.0
INCOMPLETE = 80.0
QUALITY_IMPROVEMENT = 80.0
COVERAGE_IMPROVEMENT = 70.0
