"""Allocation scoring engine - turns a financial profile into a needs/wants/savings split"""

from dataclasses import dataclass
from functools import reduce
from typing import Callable, Dict, List, Optional, Tuple

from cediwise_budget.domain.exceptions import UnknownStrategyError
from cediwise_budget.domain.models import (
    DEFAULT_LIVING_BUFFER,
    BudgetAllocation,
    FinancialPriority,
    IntelligentAllocationResult,
    LifeStage,
    SpendingStyle,
    Strategy,
    UserBudgetProfile,
)
from cediwise_budget.domain.tax import TaxCalculator, net_take_home

FALLBACK_REASONING = "Standard allocation applied."

SURVIVAL_RATIO = 0.85
HIGH_FIXED_COST_RATIO = 0.75
LOW_FIXED_COST_RATIO = 0.35
DEBT_TO_INCOME_LIMIT = 0.36


@dataclass(frozen=True)
class AllocationAdjustment:
    """Shift of each share in percentage points (1 pp = 0.01)"""

    needs: float = 0.0
    wants: float = 0.0
    savings: float = 0.0
    reason: Optional[str] = None


@dataclass(frozen=True)
class Split:
    """Unnormalized needs/wants/savings triple, may leave [0, 1] mid-computation"""

    needs: float
    wants: float
    savings: float

    def shifted(self, adjustment: AllocationAdjustment) -> "Split":
        return Split(
            needs=self.needs + adjustment.needs / 100,
            wants=self.wants + adjustment.wants / 100,
            savings=self.savings + adjustment.savings / 100,
        )


# Modifier tables: (needs, wants, savings) in percentage points.
# Every enum member must have an entry.
LIFE_STAGE_MODIFIERS: Dict[LifeStage, Tuple[float, float, float]] = {
    LifeStage.STUDENT: (8, -5, -3),
    LifeStage.YOUNG_PROFESSIONAL: (0, 0, 0),
    LifeStage.FAMILY: (12, -8, -4),
    LifeStage.RETIREE: (5, 5, -10),
}

PRIORITY_MODIFIERS: Dict[FinancialPriority, Tuple[float, float, float]] = {
    FinancialPriority.DEBT_PAYOFF: (5, -15, 10),  # savings redirected to debt
    FinancialPriority.SAVINGS_GROWTH: (0, -10, 10),
    FinancialPriority.LIFESTYLE: (-5, 10, -5),
    FinancialPriority.BALANCED: (0, 0, 0),
}

STYLE_MODIFIERS: Dict[SpendingStyle, Tuple[float, float, float]] = {
    SpendingStyle.CONSERVATIVE: (0, -5, 5),
    SpendingStyle.MODERATE: (0, 0, 0),
    SpendingStyle.LIBERAL: (0, 5, -5),
}

STRATEGY_ALLOCATIONS: Dict[Strategy, BudgetAllocation] = {
    Strategy.SURVIVAL: BudgetAllocation(needs_pct=0.9, wants_pct=0.1, savings_pct=0.0),
    Strategy.BALANCED: BudgetAllocation(needs_pct=0.5, wants_pct=0.3, savings_pct=0.2),
    Strategy.AGGRESSIVE: BudgetAllocation(needs_pct=0.4, wants_pct=0.2, savings_pct=0.4),
}


def _humanize(value: str) -> str:
    return value.replace("_", " ")


def _member(enum_type, value, default):
    """Enum member from a member or its string value; missing or unrecognised values give the default"""
    if isinstance(value, enum_type):
        return value
    members = {member.value: member for member in enum_type}
    return members.get(value, default)


def fixed_cost_ratio_to_needs(ratio: float) -> float:
    """
    Continuous curve mapping fixed cost ratio to the base needs share.

    Segments meet at 0.55 and 0.75 and 0.85, so a small change in rent never
    produces a cliff in the needs share.
    """
    if ratio >= SURVIVAL_RATIO:
        return 0.92
    elif ratio >= HIGH_FIXED_COST_RATIO:
        return 0.75 + (ratio - 0.75) * 1.7  # 0.75 -> 0.92
    elif ratio >= 0.55:
        return 0.55 + (ratio - 0.55)
    elif ratio >= LOW_FIXED_COST_RATIO:
        return 0.45 + (ratio - 0.35) * 0.5  # 0.45 -> 0.55
    else:
        return 0.40


def base_split(fixed_cost_ratio: float) -> Tuple[Split, List[str]]:
    """Base allocation from the needs curve; remainder split 60/40 wants/savings"""
    needs = fixed_cost_ratio_to_needs(fixed_cost_ratio)
    split = Split(needs=needs, wants=(1 - needs) * 0.6, savings=(1 - needs) * 0.4)
    reasoning: List[str] = []

    if fixed_cost_ratio >= SURVIVAL_RATIO:
        split = Split(needs=0.92, wants=0.08, savings=0.0)
        reasoning.append(
            "Your fixed costs exceed 85% of income. Survival mode: minimal wants, focus on essentials."
        )
    elif fixed_cost_ratio >= HIGH_FIXED_COST_RATIO:
        reasoning.append(
            "High fixed costs. We've prioritized essentials while leaving some room for small wants."
        )
    elif fixed_cost_ratio < LOW_FIXED_COST_RATIO:
        reasoning.append(
            "Low fixed costs give you flexibility. We've increased savings potential."
        )

    return split, reasoning


# Modifiers: (profile, net_income) -> AllocationAdjustment


def life_stage_modifier(profile: UserBudgetProfile, net_income: float) -> AllocationAdjustment:
    stage = _member(LifeStage, profile.life_stage, LifeStage.YOUNG_PROFESSIONAL)
    needs, wants, savings = LIFE_STAGE_MODIFIERS[stage]
    reason = None
    if stage != LifeStage.YOUNG_PROFESSIONAL:
        reason = f"Life stage ({_humanize(stage.value)}): adjusted for typical expenses."
    return AllocationAdjustment(needs, wants, savings, reason)


def priority_modifier(profile: UserBudgetProfile, net_income: float) -> AllocationAdjustment:
    priority = _member(FinancialPriority, profile.financial_priority, FinancialPriority.BALANCED)
    needs, wants, savings = PRIORITY_MODIFIERS[priority]
    reason = None
    if priority != FinancialPriority.BALANCED:
        reason = f"Your priority ({_humanize(priority.value)}): allocation tuned accordingly."
    return AllocationAdjustment(needs, wants, savings, reason)


def spending_style_modifier(profile: UserBudgetProfile, net_income: float) -> AllocationAdjustment:
    style = _member(SpendingStyle, profile.spending_style, SpendingStyle.MODERATE)
    needs, wants, savings = STYLE_MODIFIERS[style]
    return AllocationAdjustment(needs, wants, savings)


def dependents_modifier(profile: UserBudgetProfile, net_income: float) -> AllocationAdjustment:
    """Each dependent adds 2 pp to needs, capped at 10 pp"""
    dependents = profile.dependents_count or 0
    if dependents <= 0:
        return AllocationAdjustment()
    delta = min(dependents * 2, 10)
    return AllocationAdjustment(
        needs=delta,
        wants=-delta * 0.6,
        savings=-delta * 0.4,
        reason=f"{dependents} dependent(s): increased needs allocation.",
    )


def debt_pressure_modifier(profile: UserBudgetProfile, net_income: float) -> AllocationAdjustment:
    """Debt-to-income above 36% moves 5 pp from wants to needs"""
    debt_to_income = profile.debt_obligations / net_income if net_income > 0 else 0.0
    if debt_to_income <= DEBT_TO_INCOME_LIMIT:
        return AllocationAdjustment()
    return AllocationAdjustment(
        needs=5,
        wants=-5,
        reason="High debt burden: we've reduced wants to keep obligations manageable.",
    )


Modifier = Callable[[UserBudgetProfile, float], AllocationAdjustment]

# Applied in this order
MODIFIERS: Tuple[Modifier, ...] = (
    life_stage_modifier,
    priority_modifier,
    spending_style_modifier,
    dependents_modifier,
    debt_pressure_modifier,
)


def apply_modifiers(
    split: Split, profile: UserBudgetProfile, net_income: float
) -> Tuple[Split, List[str]]:
    """Fold the ordered modifiers over the split, collecting reasoning lines"""

    def step(acc: Tuple[Split, List[str]], modifier: Modifier) -> Tuple[Split, List[str]]:
        current, reasons = acc
        adjustment = modifier(profile, net_income)
        if adjustment.reason:
            reasons = reasons + [adjustment.reason]
        return current.shifted(adjustment), reasons

    return reduce(step, MODIFIERS, (split, []))


def normalize(split: Split) -> BudgetAllocation:
    """
    Clamp each share to [0, 1] and rescale so the shares sum to 1.

    A second rescale runs if the first leaves the sum more than 0.001 away from 1.
    """
    needs = min(1.0, max(0.0, split.needs))
    wants = min(1.0, max(0.0, split.wants))
    savings = min(1.0, max(0.0, split.savings))

    total = needs + wants + savings
    if total <= 0:
        return STRATEGY_ALLOCATIONS[Strategy.BALANCED]

    needs, wants, savings = needs / total, wants / total, savings / total

    total = needs + wants + savings
    if abs(total - 1) > 0.001:
        scale = 1 / total
        needs, wants, savings = needs * scale, wants * scale, savings * scale

    return BudgetAllocation(needs_pct=needs, wants_pct=wants, savings_pct=savings)


def label_strategy(allocation: BudgetAllocation) -> Strategy:
    """Descriptive label for display; does not feed back into the split"""
    if allocation.needs_pct >= 0.85:
        return Strategy.SURVIVAL
    elif allocation.savings_pct >= 0.35 and allocation.wants_pct <= 0.25:
        return Strategy.AGGRESSIVE
    elif abs(allocation.needs_pct - 0.5) < 0.1:
        return Strategy.BALANCED
    else:
        return Strategy.CUSTOM


def compute_net_income(
    profile: UserBudgetProfile, tax_calculator: Optional[TaxCalculator] = None
) -> float:
    """Monthly net income: salary (after tax when requested) plus side income"""
    salary_net = profile.stable_salary
    if profile.apply_tax:
        salary_net = (tax_calculator or net_take_home)(profile.stable_salary)
    return max(0.0, salary_net + profile.side_income)


def compute_fixed_costs(profile: UserBudgetProfile) -> float:
    living_buffer = profile.living_buffer
    if living_buffer is None or living_buffer < 0:
        living_buffer = DEFAULT_LIVING_BUFFER
    return max(
        0.0,
        profile.rent
        + profile.tithe_remittance
        + profile.debt_obligations
        + profile.utilities_total
        + living_buffer,
    )


def compute_intelligent_allocation(
    profile: UserBudgetProfile, tax_calculator: Optional[TaxCalculator] = None
) -> IntelligentAllocationResult:
    """
    Main entry point: score a profile into a normalized allocation.

    Steps:
    1. Net income, fixed costs and fixed cost ratio (ratio is 1 when income is 0)
    2. Base split from the continuous needs curve, with survival override at ratio >= 0.85
    3. Life stage, priority, spending style, dependents and debt pressure modifiers, in order
    4. Clamp and normalize so the shares sum to 1
    5. Label the strategy

    Never raises for numeric input.
    """
    net_income = compute_net_income(profile, tax_calculator)
    fixed_costs = compute_fixed_costs(profile)
    fixed_cost_ratio = fixed_costs / net_income if net_income > 0 else 1.0
    disposable_income = max(0.0, net_income - fixed_costs)

    split, reasoning = base_split(fixed_cost_ratio)
    split, modifier_reasoning = apply_modifiers(split, profile, net_income)
    reasoning.extend(modifier_reasoning)

    allocation = normalize(split)

    return IntelligentAllocationResult(
        allocation=allocation,
        strategy=label_strategy(allocation),
        net_income=net_income,
        fixed_costs=fixed_costs,
        disposable_income=disposable_income,
        fixed_cost_ratio=fixed_cost_ratio,
        reasoning=reasoning or [FALLBACK_REASONING],
    )


def strategy_to_allocation(strategy: Strategy | str) -> BudgetAllocation:
    """
    Fixed split for an explicitly chosen strategy.

    Used only when the profile owner overrides the scorer's computed split.
    """
    try:
        key = Strategy(strategy)
    except ValueError:
        raise UnknownStrategyError(f"Unknown strategy: {strategy}")

    if key not in STRATEGY_ALLOCATIONS:
        raise UnknownStrategyError(f"Strategy has no fixed allocation: {key.value}")
    return STRATEGY_ALLOCATIONS[key]
