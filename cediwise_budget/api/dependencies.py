"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from cediwise_budget.domain.tax import TaxCalculator, net_take_home


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_tax_calculator() -> TaxCalculator:
    """Provide the net take-home calculator used when a profile applies tax"""
    return net_take_home
