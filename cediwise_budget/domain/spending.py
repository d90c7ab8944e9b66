"""Actual-spend aggregation and bucket/category limits for a cycle"""

from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from cediwise_budget.domain.models import (
    BudgetAllocation,
    BudgetCategory,
    BudgetCycle,
    BudgetTransaction,
    Bucket,
    CategoryLimitImpact,
    SpendSummary,
)
from cediwise_budget.utils.number_utils import round_half_up

# Buckets lent from, in order, when a category limit overflows its own bucket
BORROW_ORDER: Dict[Bucket, Tuple[Bucket, ...]] = {
    Bucket.NEEDS: (Bucket.WANTS,),
    Bucket.WANTS: (Bucket.NEEDS, Bucket.SAVINGS),
    Bucket.SAVINGS: (Bucket.WANTS, Bucket.NEEDS),
}

EXCEEDS_INCOME_WARNING = (
    "This will exceed your total income. Debt will occur; "
    "the excess will be added to debts (to be paid next month/cycle)."
)
CHAINED_BORROW_WARNINGS = {
    Bucket.WANTS: "Remainder deducted from Need; then from Savings (warning).",
    Bucket.SAVINGS: "Remainder deducted from Wants; then from Needs.",
}


def spent_by_bucket(cycle: BudgetCycle, transactions: Iterable[BudgetTransaction]) -> Dict[Bucket, float]:
    """Sum of transaction amounts per bucket, counting only this cycle's transactions"""
    totals = {bucket: 0.0 for bucket in Bucket}
    for txn in transactions:
        if txn.cycle_id == cycle.id:
            totals[txn.bucket] += txn.amount
    return totals


def aggregate_spending(cycle: BudgetCycle, transactions: Iterable[BudgetTransaction]) -> SpendSummary:
    """
    Total a cycle's transactions by bucket and by category.

    Membership is decided by the transaction's cycle_id, never by occurred_at.
    Transactions without a category count toward their bucket and `uncategorized`.
    """
    cycle_txns = [t for t in transactions if t.cycle_id == cycle.id]

    by_category: Dict[str, float] = defaultdict(float)
    uncategorized = 0.0
    for txn in cycle_txns:
        if txn.category_id:
            by_category[txn.category_id] += txn.amount
        else:
            uncategorized += txn.amount

    return SpendSummary(
        by_bucket=spent_by_bucket(cycle, cycle_txns),
        by_category=dict(by_category),
        uncategorized=uncategorized,
    )


def bucket_limits(cycle: BudgetCycle, monthly_net_income: float) -> Dict[Bucket, float]:
    """Spending limit per bucket from the cycle's stored percentages, used as-is"""
    return {bucket: monthly_net_income * cycle.allocation.pct_for(bucket) for bucket in Bucket}


def recalculate_category_limits(
    cycle: BudgetCycle,
    categories: List[BudgetCategory],
    monthly_net_income: float,
) -> List[BudgetCategory]:
    """
    Spread each bucket's limit evenly over this cycle's categories in that bucket.

    Categories with manual_override keep their amount but still count toward the
    split. Categories of other cycles are returned unchanged.
    """
    limits = bucket_limits(cycle, monthly_net_income)
    counts: Dict[Bucket, int] = defaultdict(int)
    for category in categories:
        if category.cycle_id == cycle.id:
            counts[category.bucket] += 1

    recalculated = []
    for category in categories:
        if category.cycle_id != cycle.id or category.manual_override:
            recalculated.append(category)
            continue
        per_category = limits[category.bucket] / counts[category.bucket]
        recalculated.append(replace(category, limit_amount=max(0.0, round_half_up(per_category))))

    return recalculated


def borrow_for_bucket(
    bucket: Bucket,
    remainder: float,
    allocation: BudgetAllocation,
    limits: Dict[Bucket, float],
    monthly_net_income: float,
) -> Tuple[Optional[BudgetAllocation], Optional[str]]:
    """
    Move `remainder` into `bucket` from the others in BORROW_ORDER.

    Each lender gives at most its whole limit. Shares are renormalized and
    rounded to 2 dp; returns (None, None) when nothing is left to normalize.
    """
    pct = {b: allocation.pct_for(b) for b in Bucket}
    lenders = BORROW_ORDER[bucket]
    lent_from = []
    outstanding = remainder

    for lender in lenders:
        if outstanding <= 0:
            break
        take = min(outstanding, limits[lender])
        outstanding -= take
        if take > 0:
            pct[lender] = max(0.0, pct[lender] - take / monthly_net_income)
            pct[bucket] += take / monthly_net_income
            lent_from.append(lender)

    warning = None
    if len(lenders) > 1 and lenders[1] in lent_from:
        warning = CHAINED_BORROW_WARNINGS[bucket]
    elif lenders[0] in lent_from:
        warning = f"Remainder will be deducted from {lenders[0].value.capitalize()}; allocation % will be updated."

    total = sum(pct.values())
    if total <= 0.001:
        return None, warning

    return (
        BudgetAllocation(
            needs_pct=round_half_up(pct[Bucket.NEEDS] / total),
            wants_pct=round_half_up(pct[Bucket.WANTS] / total),
            savings_pct=round_half_up(pct[Bucket.SAVINGS] / total),
        ),
        warning,
    )


def check_category_limit_impact(
    cycle: BudgetCycle,
    categories: List[BudgetCategory],
    monthly_net_income: float,
    bucket: Bucket,
    new_limit: float,
    category_id: Optional[str] = None,
) -> CategoryLimitImpact:
    """
    Check what adding (or updating, when category_id is given) a category limit does.

    The category being updated is left out of the existing sums and replaced by
    new_limit. Going over income reports the debt and suggests nothing; going over
    the bucket alone suggests an allocation that borrows from the other buckets.
    """
    limits = bucket_limits(cycle, monthly_net_income)

    committed = {b: 0.0 for b in Bucket}
    for category in categories:
        if category.cycle_id == cycle.id and category.id != category_id:
            committed[category.bucket] += category.limit_amount

    category_limit_sum = committed[bucket] + new_limit
    remainder = max(0.0, category_limit_sum - limits[bucket])
    total_after = sum(committed.values()) + new_limit
    exceeds_income = total_after > monthly_net_income
    exceeds_bucket = remainder > 0

    impact = CategoryLimitImpact(
        exceeds_bucket=exceeds_bucket,
        exceeds_income=exceeds_income,
        bucket_total=limits[bucket],
        current_category_limit_sum=category_limit_sum,
        remainder=remainder,
        debt_amount=max(0.0, total_after - monthly_net_income) if exceeds_income else 0.0,
    )

    if exceeds_income:
        impact.warnings.append(EXCEEDS_INCOME_WARNING)
        impact.message = "Budget exceeds income. Debt will occur."
    elif exceeds_bucket:
        impact.suggested_allocation, warning = borrow_for_bucket(
            bucket, remainder, cycle.allocation, limits, monthly_net_income
        )
        if warning:
            impact.warnings.append(warning)
        impact.message = "Budget exceeds allocation for this bucket."

    return impact
