"""Cycle-close rollover of unspent funds"""

import uuid
from datetime import timedelta
from typing import Iterable, Optional

from cediwise_budget.domain.models import (
    BudgetAllocation,
    BudgetCycle,
    BudgetTransaction,
    Bucket,
    RolloverResult,
)
from cediwise_budget.domain.spending import bucket_limits, spent_by_bucket
from cediwise_budget.utils.date_utils import anchor_in_month, next_day


def calculate_rollover(
    cycle: BudgetCycle,
    transactions: Iterable[BudgetTransaction],
    monthly_net_income: float,
) -> RolloverResult:
    """
    Unspent amount per bucket: limit minus spend, floored at zero.

    Overspending never carries forward as a deficit.
    """
    if monthly_net_income <= 0:
        return RolloverResult()

    spent = spent_by_bucket(cycle, transactions)
    limits = bucket_limits(cycle, monthly_net_income)
    leftover = {bucket: max(0.0, limits[bucket] - spent[bucket]) for bucket in Bucket}

    return RolloverResult(
        needs=leftover[Bucket.NEEDS],
        wants=leftover[Bucket.WANTS],
        savings=leftover[Bucket.SAVINGS],
    )


def start_next_cycle(
    previous: BudgetCycle,
    allocation: BudgetAllocation,
    rollover: Optional[RolloverResult] = None,
    cycle_id: Optional[str] = None,
) -> BudgetCycle:
    """
    Build the cycle that follows `previous`, seeded with a carry-forward.

    The new cycle starts the day after the previous one ends and keeps its payday.
    """
    start = next_day(previous.end_date)
    following_anchor = anchor_in_month(start.year, start.month, 1, previous.payday_day)

    return BudgetCycle(
        id=cycle_id or str(uuid.uuid4()),
        user_id=previous.user_id,
        start_date=start,
        end_date=following_anchor - timedelta(days=1),
        payday_day=previous.payday_day,
        needs_pct=allocation.needs_pct,
        wants_pct=allocation.wants_pct,
        savings_pct=allocation.savings_pct,
        rollover_from_previous=rollover or RolloverResult(),
    )
