"""POST /v1/cycle/* - cycle window, period-end review and category limit endpoints"""

import time
from typing import List
from fastapi import APIRouter, Request

from cediwise_budget.api.v1.allocation import to_allocation_schema
from cediwise_budget.api.v1.schemas import (
    BucketVarianceSchema,
    CategoryImpactRequest,
    CategoryImpactResponse,
    CycleReviewRequest,
    CycleSchema,
    CycleWindowRequest,
    CycleWindowResponse,
    ReallocationResponse,
    RolloverResponse,
    SpendingResponse,
    TransactionSchema,
)
from cediwise_budget.api.dependencies import get_request_id
from cediwise_budget.config import settings
from cediwise_budget.domain.cycles import compute_cycle_window
from cediwise_budget.domain.models import BudgetCategory, BudgetCycle, BudgetTransaction, BucketVariance
from cediwise_budget.domain.reallocation import analyze_and_suggest_reallocation, format_reallocation_details
from cediwise_budget.domain.rollover import calculate_rollover
from cediwise_budget.domain.spending import aggregate_spending, check_category_limit_impact
from cediwise_budget.infrastructure.observability.metrics import record_reallocation, record_rollover
from cediwise_budget.infrastructure.observability.logging import log_reallocation

router = APIRouter()


def to_domain_cycle(schema: CycleSchema) -> BudgetCycle:
    return BudgetCycle(**schema.model_dump())


def to_domain_transactions(schemas: List[TransactionSchema]) -> List[BudgetTransaction]:
    return [BudgetTransaction(**t.model_dump()) for t in schemas]


def to_variance_schemas(variances: List[BucketVariance]) -> List[BucketVarianceSchema]:
    return [
        BucketVarianceSchema(bucket=v.bucket, amount=v.amount, percentage=v.percentage)
        for v in variances
    ]


@router.post("/cycle/window", response_model=CycleWindowResponse)
def get_cycle_window(request_body: CycleWindowRequest):
    """Payday-to-payday window containing the reference date"""
    payday_day = request_body.payday_day or settings.default_payday_day
    window = compute_cycle_window(request_body.reference_date, payday_day)
    return CycleWindowResponse(start=window.start, end=window.end, payday_day=payday_day)


@router.post("/cycle/spending", response_model=SpendingResponse)
def get_cycle_spending(request_body: CycleReviewRequest):
    """Actual spend of the cycle by bucket and category"""
    cycle = to_domain_cycle(request_body.cycle)
    summary = aggregate_spending(cycle, to_domain_transactions(request_body.transactions))

    return SpendingResponse(
        cycle_id=cycle.id,
        by_bucket=summary.by_bucket,
        by_category=summary.by_category,
        uncategorized=summary.uncategorized,
        total=summary.total,
    )


@router.post("/cycle/reallocation", response_model=ReallocationResponse)
def suggest_reallocation(request_body: CycleReviewRequest, request: Request):
    """
    Compare plan vs actual for a cycle and suggest new percentages.

    The suggestion is advisory; applying it to the next cycle is the caller's job.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    cycle = to_domain_cycle(request_body.cycle)
    suggestion = analyze_and_suggest_reallocation(
        cycle,
        to_domain_transactions(request_body.transactions),
        request_body.monthly_net_income,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_reallocation(suggestion.should_reallocate)
    log_reallocation(request_id, cycle.id, suggestion.should_reallocate, suggestion.reason, duration_ms)

    return ReallocationResponse(
        should_reallocate=suggestion.should_reallocate,
        reason=suggestion.reason,
        changes=to_allocation_schema(suggestion.changes) if suggestion.changes else None,
        overspent_buckets=to_variance_schemas(suggestion.overspent_buckets),
        underspent_buckets=to_variance_schemas(suggestion.underspent_buckets),
        summary=format_reallocation_details(suggestion),
    )


@router.post("/cycle/rollover", response_model=RolloverResponse)
def get_cycle_rollover(request_body: CycleReviewRequest):
    """Unspent amount per bucket, eligible to carry into the next cycle"""
    rollover = calculate_rollover(
        to_domain_cycle(request_body.cycle),
        to_domain_transactions(request_body.transactions),
        request_body.monthly_net_income,
    )
    record_rollover(rollover.total)

    return RolloverResponse(
        needs=rollover.needs,
        wants=rollover.wants,
        savings=rollover.savings,
        total=rollover.total,
    )


@router.post("/cycle/category-impact", response_model=CategoryImpactResponse)
def get_category_impact(request_body: CategoryImpactRequest):
    """Whether a new or updated category limit overflows its bucket or the income"""
    impact = check_category_limit_impact(
        to_domain_cycle(request_body.cycle),
        [BudgetCategory(**c.model_dump()) for c in request_body.categories],
        request_body.monthly_net_income,
        request_body.bucket,
        request_body.new_limit,
        request_body.category_id,
    )

    return CategoryImpactResponse(
        exceeds_bucket=impact.exceeds_bucket,
        exceeds_income=impact.exceeds_income,
        bucket_total=impact.bucket_total,
        current_category_limit_sum=impact.current_category_limit_sum,
        remainder=impact.remainder,
        debt_amount=impact.debt_amount,
        suggested_allocation=(
            to_allocation_schema(impact.suggested_allocation) if impact.suggested_allocation else None
        ),
        warnings=impact.warnings,
        message=impact.message,
    )
