"""Payday-anchored budget cycles"""

import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from cediwise_budget.domain.exceptions import ReallocationNotApplicableError
from cediwise_budget.domain.models import (
    BudgetAllocation,
    BudgetCycle,
    CycleWindow,
    ReallocationSuggestion,
)
from cediwise_budget.utils.date_utils import anchor_in_month, as_date, days_between


def compute_cycle_window(reference_date: date | datetime, payday_day: int) -> CycleWindow:
    """
    Compute the payday-to-payday window containing reference_date.

    Requirements:
    - payday_day is clamped to the length of each month it is applied to
    - start is this month's payday if reference_date is on or after it, else last month's
    - end is the day before the next payday

    Comparison is date-only; a datetime is reduced to its calendar date.

    Example:
        payday 31, reference 2026-02-10 -> start 2026-01-31, end 2026-02-27
    """
    day = as_date(reference_date)

    this_month_anchor = anchor_in_month(day.year, day.month, 0, payday_day)
    if day >= this_month_anchor:
        start = this_month_anchor
    else:
        start = anchor_in_month(day.year, day.month, -1, payday_day)

    next_anchor = anchor_in_month(start.year, start.month, 1, payday_day)
    return CycleWindow(start=start, end=next_anchor - timedelta(days=1))


def create_cycle(
    user_id: str,
    reference_date: date | datetime,
    payday_day: int,
    allocation: BudgetAllocation,
    cycle_id: Optional[str] = None,
) -> BudgetCycle:
    """Create a cycle for the window around reference_date, snapshotting the allocation"""
    window = compute_cycle_window(reference_date, payday_day)
    return BudgetCycle(
        id=cycle_id or str(uuid.uuid4()),
        user_id=user_id,
        start_date=window.start,
        end_date=window.end,
        payday_day=payday_day,
        needs_pct=allocation.needs_pct,
        wants_pct=allocation.wants_pct,
        savings_pct=allocation.savings_pct,
    )


def apply_reallocation(cycle: BudgetCycle, suggestion: ReallocationSuggestion) -> BudgetCycle:
    """Return a copy of the cycle carrying the suggested percentages"""
    if not suggestion.should_reallocate or suggestion.changes is None:
        raise ReallocationNotApplicableError(f"No reallocation suggested for cycle {cycle.id}")

    return replace(
        cycle,
        needs_pct=suggestion.changes.needs_pct,
        wants_pct=suggestion.changes.wants_pct,
        savings_pct=suggestion.changes.savings_pct,
        reallocation_applied=True,
        reallocation_reason=suggestion.reason,
    )


def is_date_in_cycle(cycle: BudgetCycle, day: date | datetime) -> bool:
    return cycle.start_date <= as_date(day) <= cycle.end_date


def days_remaining_in_cycle(end_date: date, today: date | datetime) -> int:
    """Days left in the cycle, counting the end day itself; 0 once it has passed"""
    return max(0, days_between(as_date(today), end_date) + 1)
