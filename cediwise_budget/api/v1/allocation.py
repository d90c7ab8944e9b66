"""POST /v1/allocation and GET /v1/strategy/{name} - budget split endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from cediwise_budget.api.v1.schemas import AllocationResponse, AllocationSchema, ProfileRequest
from cediwise_budget.api.dependencies import get_request_id, get_tax_calculator
from cediwise_budget.domain.allocation import compute_intelligent_allocation, strategy_to_allocation
from cediwise_budget.domain.exceptions import UnknownStrategyError
from cediwise_budget.domain.models import BudgetAllocation, UserBudgetProfile
from cediwise_budget.domain.tax import TaxCalculator
from cediwise_budget.infrastructure.observability.metrics import record_allocation
from cediwise_budget.infrastructure.observability.logging import log_allocation

router = APIRouter()


def to_allocation_schema(allocation: BudgetAllocation) -> AllocationSchema:
    return AllocationSchema(
        needs_pct=allocation.needs_pct,
        wants_pct=allocation.wants_pct,
        savings_pct=allocation.savings_pct,
    )


@router.post("/allocation", response_model=AllocationResponse)
def create_allocation(
    request_body: ProfileRequest,
    request: Request,
    tax_calculator: TaxCalculator = Depends(get_tax_calculator),
):
    """
    Score a financial profile into a needs/wants/savings split.

    Returns the normalized allocation, its strategy label, the income figures
    it was derived from and the reasoning lines to show the user.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    profile = UserBudgetProfile(**request_body.model_dump())
    result = compute_intelligent_allocation(profile, tax_calculator)

    duration_ms = (time.time() - start_time) * 1000
    record_allocation(result.strategy.value)
    log_allocation(request_id, result.strategy.value, result.fixed_cost_ratio, duration_ms)

    return AllocationResponse(
        allocation=to_allocation_schema(result.allocation),
        strategy=result.strategy,
        net_income=result.net_income,
        fixed_costs=result.fixed_costs,
        disposable_income=result.disposable_income,
        fixed_cost_ratio=result.fixed_cost_ratio,
        reasoning=result.reasoning,
    )


@router.get("/strategy/{name}", response_model=AllocationSchema)
def get_strategy_allocation(name: str, request: Request):
    """Fixed split for an explicitly chosen strategy (survival, balanced, aggressive)"""
    try:
        allocation = strategy_to_allocation(name)
    except UnknownStrategyError as e:
        logging.warning(f"Unknown strategy: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=404, detail=str(e))

    return to_allocation_schema(allocation)
