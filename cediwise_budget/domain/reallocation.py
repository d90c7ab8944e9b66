"""Period-end reallocation analysis - compares plan vs actual and proposes a shift"""

from typing import Dict, Iterable, List, Optional, Tuple

from cediwise_budget.domain.models import (
    BudgetAllocation,
    BudgetCycle,
    BudgetTransaction,
    Bucket,
    BucketVariance,
    ReallocationSuggestion,
)
from cediwise_budget.domain.spending import bucket_limits, spent_by_bucket
from cediwise_budget.utils.number_utils import round_half_up, whole_percent

OVERSPEND_THRESHOLD = 0.10
UNDERSPEND_THRESHOLD = 0.15
MAX_SHIFT = 0.05
MIN_WANTS_PCT = 0.10
SIGNIFICANT_CHANGE = 0.01


def detect_variances(
    spent: Dict[Bucket, float], limits: Dict[Bucket, float]
) -> Tuple[List[BucketVariance], List[BucketVariance]]:
    """
    Split buckets into overspent (> 10% over limit) and underspent (> 15% under).

    Amounts and percentages are reported as absolute values.
    A bucket with a zero limit has percentage 0 and is never flagged.
    """
    overspent: List[BucketVariance] = []
    underspent: List[BucketVariance] = []

    for bucket in Bucket:
        diff = spent[bucket] - limits[bucket]
        percentage = diff / limits[bucket] if limits[bucket] > 0 else 0.0

        if diff > 0 and percentage > OVERSPEND_THRESHOLD:
            overspent.append(BucketVariance(bucket=bucket, amount=diff, percentage=percentage))
        elif diff < 0 and percentage < -UNDERSPEND_THRESHOLD:
            underspent.append(BucketVariance(bucket=bucket, amount=abs(diff), percentage=abs(percentage)))

    return overspent, underspent


def _find(variances: List[BucketVariance], bucket: Bucket) -> Optional[BucketVariance]:
    return next((v for v in variances if v.bucket == bucket), None)


def propose_shift(
    allocation: BudgetAllocation,
    overspent: List[BucketVariance],
    underspent: List[BucketVariance],
) -> Tuple[Dict[Bucket, float], str]:
    """
    Apply the first matching rule; returns new shares and reason ("" when no rule matched).

    Rules, in priority order:
    a. needs overspent: take from wants if underspent, else from savings if underspent
    b. wants overspent and savings underspent: take from savings
    c. needs underspent and wants or savings overspent: give to savings if underspent, else wants

    Patterns outside these rules (e.g. only savings overspent) produce no reason.
    """
    pct = {bucket: allocation.pct_for(bucket) for bucket in Bucket}
    reason = ""

    needs_over = _find(overspent, Bucket.NEEDS)
    wants_over = _find(overspent, Bucket.WANTS)
    savings_over = _find(overspent, Bucket.SAVINGS)
    needs_under = _find(underspent, Bucket.NEEDS)
    wants_under = _find(underspent, Bucket.WANTS)
    savings_under = _find(underspent, Bucket.SAVINGS)

    if needs_over:
        shift = min(MAX_SHIFT, needs_over.percentage / 2)
        if wants_under:
            pct[Bucket.WANTS] = max(MIN_WANTS_PCT, pct[Bucket.WANTS] - shift)
            pct[Bucket.NEEDS] += shift
            reason = "Increased Needs allocation due to consistent overspending, reduced Wants."
        elif savings_under:
            pct[Bucket.SAVINGS] = max(0.0, pct[Bucket.SAVINGS] - shift)
            pct[Bucket.NEEDS] += shift
            reason = "Increased Needs allocation due to consistent overspending, reduced Savings."
    elif wants_over and savings_under:
        shift = min(MAX_SHIFT, wants_over.percentage / 2)
        pct[Bucket.SAVINGS] = max(0.0, pct[Bucket.SAVINGS] - shift)
        pct[Bucket.WANTS] += shift
        reason = "Adjusted Wants allocation due to overspending, reduced Savings."
    elif needs_under and (wants_over or savings_over):
        shift = min(MAX_SHIFT, needs_under.percentage / 2)
        pct[Bucket.NEEDS] -= shift
        if savings_under:
            pct[Bucket.SAVINGS] += shift
            reason = "Decreased Needs allocation due to consistent underspending, increased Savings."
        else:
            pct[Bucket.WANTS] += shift
            reason = "Decreased Needs allocation due to consistent underspending, increased Wants."

    return pct, reason


def _settle(pct: Dict[Bucket, float]) -> BudgetAllocation:
    """Rescale if the shares drifted more than 0.01 from 1, then round to 2 dp"""
    total = sum(pct.values())
    if abs(total - 1) > 0.01:
        pct = {bucket: value / total for bucket, value in pct.items()}

    return BudgetAllocation(
        needs_pct=round_half_up(pct[Bucket.NEEDS]),
        wants_pct=round_half_up(pct[Bucket.WANTS]),
        savings_pct=round_half_up(pct[Bucket.SAVINGS]),
    )


def analyze_and_suggest_reallocation(
    cycle: BudgetCycle,
    transactions: Iterable[BudgetTransaction],
    monthly_net_income: float,
) -> ReallocationSuggestion:
    """
    Main entry point: compare a cycle's spending to its plan and suggest new percentages.

    A suggestion needs both a donor (underspent) and a recipient (overspent) bucket,
    a matching rule, and a change of more than 1 pp in at least one bucket.
    The cycle's stored percentages are used as-is, never renormalized.
    """
    if monthly_net_income <= 0:
        return ReallocationSuggestion(should_reallocate=False)

    spent = spent_by_bucket(cycle, transactions)
    limits = bucket_limits(cycle, monthly_net_income)
    overspent, underspent = detect_variances(spent, limits)

    if not overspent or not underspent:
        return ReallocationSuggestion(should_reallocate=False)

    current = cycle.allocation
    pct, reason = propose_shift(current, overspent, underspent)
    changes = _settle(pct)

    significant_change = any(
        abs(changes.pct_for(bucket) - current.pct_for(bucket)) > SIGNIFICANT_CHANGE
        for bucket in Bucket
    )
    if not significant_change or not reason:
        return ReallocationSuggestion(should_reallocate=False)

    return ReallocationSuggestion(
        should_reallocate=True,
        reason=reason,
        changes=changes,
        overspent_buckets=overspent,
        underspent_buckets=underspent,
    )


def format_reallocation_details(suggestion: ReallocationSuggestion) -> str:
    """Human-readable over/under-spend summary, empty when nothing is suggested"""
    if not suggestion.should_reallocate:
        return ""

    lines = []
    if suggestion.overspent_buckets:
        lines.append(
            "Overspent: "
            + ", ".join(f"{v.bucket.value} by {whole_percent(v.percentage)}%" for v in suggestion.overspent_buckets)
        )
    if suggestion.underspent_buckets:
        lines.append(
            "Underspent: "
            + ", ".join(f"{v.bucket.value} by {whole_percent(v.percentage)}%" for v in suggestion.underspent_buckets)
        )
    return "\n".join(lines)


def format_allocation(allocation: BudgetAllocation) -> str:
    """Whole-percent display, e.g. 50/30/20"""
    return "/".join(
        str(whole_percent(allocation.pct_for(bucket))) for bucket in Bucket
    )
