"""Ghana SSNIT + PAYE withholding, used to estimate monthly net take-home pay"""

import math
from dataclasses import dataclass
from typing import Callable, List, Tuple

# Signature consumed by the allocation scorer: gross monthly -> net take-home
TaxCalculator = Callable[[float], float]

SSNIT_RATE = 0.055
SSNIT_INSURABLE_CAP = 69_000

# 2026 monthly PAYE bands: (upper bound of band, marginal rate)
PAYE_BANDS: List[Tuple[float, float]] = [
    (490, 0.0),
    (1_800, 0.055),
    (4_350, 0.075),
    (6_900, 0.095),
    (13_800, 0.105),
    (20_700, 0.115),
    (27_600, 0.125),
    (math.inf, 0.135),
]


@dataclass(frozen=True)
class TaxBreakdown:
    ssnit: float
    paye: float
    net_take_home: float


def calculate_paye(taxable: float) -> float:
    """Graduated PAYE on income after SSNIT"""
    paye = 0.0
    lower = 0.0
    for upper, rate in PAYE_BANDS:
        if taxable <= lower:
            break
        paye += (min(taxable, upper) - lower) * rate
        lower = upper
    return paye


def compute_ghana_tax_monthly(gross_monthly: float) -> TaxBreakdown:
    """
    Compute SSNIT and PAYE deductions for a monthly gross salary.

    Non-finite or negative salaries are treated as zero.
    """
    gross = gross_monthly if math.isfinite(gross_monthly) else 0.0
    gross = max(0.0, gross)

    ssnit = min(gross * SSNIT_RATE, SSNIT_INSURABLE_CAP * SSNIT_RATE)
    paye = calculate_paye(gross - ssnit)

    return TaxBreakdown(
        ssnit=ssnit,
        paye=paye,
        net_take_home=max(0.0, gross - ssnit - paye),
    )


def net_take_home(gross_monthly: float) -> float:
    """Default TaxCalculator"""
    return compute_ghana_tax_monthly(gross_monthly).net_take_home
