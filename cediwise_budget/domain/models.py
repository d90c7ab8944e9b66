"""Domain models - pure Python dataclasses representing budgeting entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional


class Bucket(str, Enum):
    """One of the three fixed spending buckets"""

    NEEDS = "needs"
    WANTS = "wants"
    SAVINGS = "savings"


class LifeStage(str, Enum):
    STUDENT = "student"
    YOUNG_PROFESSIONAL = "young_professional"
    FAMILY = "family"
    RETIREE = "retiree"


class FinancialPriority(str, Enum):
    DEBT_PAYOFF = "debt_payoff"
    SAVINGS_GROWTH = "savings_growth"
    LIFESTYLE = "lifestyle"
    BALANCED = "balanced"


class SpendingStyle(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    LIBERAL = "liberal"


class IncomeFrequency(str, Enum):
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"


class Strategy(str, Enum):
    """Descriptive label for an allocation; custom has no fixed split"""

    SURVIVAL = "survival"
    BALANCED = "balanced"
    AGGRESSIVE = "aggressive"
    CUSTOM = "custom"


DEFAULT_LIVING_BUFFER = 600.0


@dataclass
class UserBudgetProfile:
    """Financial facts describing a person, already validated upstream"""

    stable_salary: float  # gross monthly
    apply_tax: bool = False
    side_income: float = 0.0
    rent: float = 0.0
    tithe_remittance: float = 0.0
    debt_obligations: float = 0.0
    utilities_total: float = 0.0
    living_buffer: Optional[float] = None  # groceries, transport basics
    life_stage: Optional[LifeStage] = None
    dependents_count: int = 0
    income_frequency: IncomeFrequency = IncomeFrequency.MONTHLY
    spending_style: Optional[SpendingStyle] = None
    financial_priority: Optional[FinancialPriority] = None


@dataclass(frozen=True)
class BudgetAllocation:
    """Three-way percentage split, each share in [0, 1]"""

    needs_pct: float
    wants_pct: float
    savings_pct: float

    @property
    def total(self) -> float:
        return self.needs_pct + self.wants_pct + self.savings_pct

    def pct_for(self, bucket: Bucket) -> float:
        return {
            Bucket.NEEDS: self.needs_pct,
            Bucket.WANTS: self.wants_pct,
            Bucket.SAVINGS: self.savings_pct,
        }[bucket]


@dataclass
class IntelligentAllocationResult:
    """Output of the allocation scorer"""

    allocation: BudgetAllocation
    strategy: Strategy
    net_income: float
    fixed_costs: float
    disposable_income: float
    fixed_cost_ratio: float
    reasoning: List[str]


@dataclass(frozen=True)
class CycleWindow:
    """Inclusive date range of a payday-anchored cycle"""

    start: date
    end: date


@dataclass(frozen=True)
class RolloverResult:
    """Unspent amount per bucket at cycle close, never negative"""

    needs: float = 0.0
    wants: float = 0.0
    savings: float = 0.0

    @property
    def total(self) -> float:
        return self.needs + self.wants + self.savings

    def amount_for(self, bucket: Bucket) -> float:
        return getattr(self, bucket.value)


@dataclass
class BudgetCycle:
    """One payday-to-payday period with its allocation snapshot"""

    id: str
    user_id: str
    start_date: date
    end_date: date
    payday_day: int  # 1..31
    needs_pct: float
    wants_pct: float
    savings_pct: float
    rollover_from_previous: RolloverResult = field(default_factory=RolloverResult)
    reallocation_applied: bool = False
    reallocation_reason: Optional[str] = None

    @property
    def allocation(self) -> BudgetAllocation:
        return BudgetAllocation(
            needs_pct=self.needs_pct,
            wants_pct=self.wants_pct,
            savings_pct=self.savings_pct,
        )


@dataclass
class BudgetCategory:
    """Named sub-division of a bucket, scoped to one cycle"""

    id: str
    cycle_id: str
    bucket: Bucket
    name: str
    limit_amount: float
    manual_override: bool = False  # user-set limit, never recalculated


@dataclass
class BudgetTransaction:
    """Recorded expense against a cycle"""

    id: str
    cycle_id: str
    bucket: Bucket
    amount: float
    occurred_at: datetime
    category_id: Optional[str] = None
    note: Optional[str] = None


@dataclass
class SpendSummary:
    """Actual spend of one cycle, by bucket and by category"""

    by_bucket: Dict[Bucket, float]
    by_category: Dict[str, float]
    uncategorized: float = 0.0

    @property
    def total(self) -> float:
        return sum(self.by_bucket.values())


@dataclass(frozen=True)
class BucketVariance:
    """Over- or under-spend of a bucket: absolute amount and share of its limit"""

    bucket: Bucket
    amount: float
    percentage: float


@dataclass
class ReallocationSuggestion:
    """Output of the reallocation analyzer"""

    should_reallocate: bool
    reason: Optional[str] = None
    changes: Optional[BudgetAllocation] = None
    overspent_buckets: List[BucketVariance] = field(default_factory=list)
    underspent_buckets: List[BucketVariance] = field(default_factory=list)


@dataclass
class CategoryLimitImpact:
    """Effect of setting a category limit on its bucket and on total income"""

    exceeds_bucket: bool
    exceeds_income: bool
    bucket_total: float
    current_category_limit_sum: float  # bucket's category limits including the new one
    remainder: float  # amount over the bucket limit
    debt_amount: float  # amount over income
    suggested_allocation: Optional[BudgetAllocation] = None
    warnings: List[str] = field(default_factory=list)
    message: str = ""
