"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Dict, List, Optional

from cediwise_budget.domain.models import (
    Bucket,
    FinancialPriority,
    IncomeFrequency,
    LifeStage,
    SpendingStyle,
    Strategy,
)


class ProfileRequest(BaseModel):
    """Request body for POST /v1/allocation"""

    stable_salary: float = Field(..., ge=0, description="Gross monthly salary")
    apply_tax: bool = False
    side_income: float = Field(0, ge=0)
    rent: float = Field(0, ge=0)
    tithe_remittance: float = Field(0, ge=0)
    debt_obligations: float = Field(0, ge=0)
    utilities_total: float = Field(0, ge=0)
    living_buffer: Optional[float] = Field(None, ge=0, description="Defaults to 600 when omitted")
    life_stage: Optional[LifeStage] = None
    dependents_count: int = Field(0, ge=0)
    income_frequency: IncomeFrequency = IncomeFrequency.MONTHLY
    spending_style: Optional[SpendingStyle] = None
    financial_priority: Optional[FinancialPriority] = None


class AllocationSchema(BaseModel):
    needs_pct: float
    wants_pct: float
    savings_pct: float


class AllocationResponse(BaseModel):
    """Response for POST /v1/allocation"""

    allocation: AllocationSchema
    strategy: Strategy
    net_income: float
    fixed_costs: float
    disposable_income: float
    fixed_cost_ratio: float
    reasoning: List[str]


class CycleWindowRequest(BaseModel):
    """Request body for POST /v1/cycle/window"""

    reference_date: date
    payday_day: Optional[int] = Field(None, ge=1, le=31)


class CycleWindowResponse(BaseModel):
    start: date
    end: date
    payday_day: int


class CycleSchema(BaseModel):
    """Snapshot of a budget cycle supplied by the caller"""

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    payday_day: int = Field(..., ge=1, le=31)
    needs_pct: float = Field(..., ge=0, le=1)
    wants_pct: float = Field(..., ge=0, le=1)
    savings_pct: float = Field(..., ge=0, le=1)


class TransactionSchema(BaseModel):
    id: str
    cycle_id: str
    bucket: Bucket
    amount: float = Field(..., ge=0)
    occurred_at: datetime
    category_id: Optional[str] = None
    note: Optional[str] = None


class CycleReviewRequest(BaseModel):
    """Request body for the cycle spending, reallocation and rollover endpoints"""

    cycle: CycleSchema
    transactions: List[TransactionSchema] = []
    monthly_net_income: float


class SpendingResponse(BaseModel):
    cycle_id: str
    by_bucket: Dict[Bucket, float]
    by_category: Dict[str, float]
    uncategorized: float
    total: float


class BucketVarianceSchema(BaseModel):
    bucket: Bucket
    amount: float
    percentage: float


class ReallocationResponse(BaseModel):
    """Response for POST /v1/cycle/reallocation"""

    should_reallocate: bool
    reason: Optional[str] = None
    changes: Optional[AllocationSchema] = None
    overspent_buckets: List[BucketVarianceSchema] = []
    underspent_buckets: List[BucketVarianceSchema] = []
    summary: str = ""


class RolloverResponse(BaseModel):
    """Response for POST /v1/cycle/rollover"""

    needs: float
    wants: float
    savings: float
    total: float


class CategorySchema(BaseModel):
    id: str
    cycle_id: str
    bucket: Bucket
    name: str
    limit_amount: float = Field(..., ge=0)
    manual_override: bool = False


class CategoryImpactRequest(BaseModel):
    """Request body for POST /v1/cycle/category-impact"""

    cycle: CycleSchema
    categories: List[CategorySchema] = []
    monthly_net_income: float
    bucket: Bucket
    new_limit: float = Field(..., ge=0)
    category_id: Optional[str] = Field(None, description="Set when updating an existing category")


class CategoryImpactResponse(BaseModel):
    """Response for POST /v1/cycle/category-impact"""

    exceeds_bucket: bool
    exceeds_income: bool
    bucket_total: float
    current_category_limit_sum: float
    remainder: float
    debt_amount: float
    suggested_allocation: Optional[AllocationSchema] = None
    warnings: List[str] = []
    message: str = ""
