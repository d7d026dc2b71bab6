"""Progressive (bracketed) tax evaluation shared by every jurisdiction."""

import math
from typing import Iterable, Union

from .schemas import TaxBracket

BracketLike = Union[TaxBracket, dict, tuple]


def _normalize(bracket: BracketLike) -> tuple[float, float]:
    """Return (upper_bound, rate) for a bracket model, YAML dict or pair."""
    if isinstance(bracket, TaxBracket):
        return bracket.upper_bound, bracket.rate
    if isinstance(bracket, dict):
        up_to = bracket.get("up_to")
        return (math.inf if up_to is None else float(up_to)), float(bracket["rate"])
    up_to, rate = bracket
    return (math.inf if up_to is None else float(up_to)), float(rate)


def progressive_tax(taxable_amount: float, brackets: Iterable[BracketLike]) -> float:
    """Calculate tax by walking brackets in ascending order.

    Each bracket taxes the slice of income between the previous bound and its
    own bound. Amounts at or below zero owe nothing.

    Args:
        taxable_amount: Income after deductions
        brackets: Ordered brackets; the last one is unbounded

    Returns:
        Tax owed (never negative)
    """
    if not taxable_amount or taxable_amount <= 0 or math.isnan(taxable_amount):
        return 0.0

    tax_owed = 0.0
    previous_bound = 0.0

    for bracket in brackets:
        bound, rate = _normalize(bracket)
        chunk = max(0.0, min(taxable_amount, bound) - previous_bound)
        tax_owed += chunk * rate
        if taxable_amount <= bound:
            break
        previous_bound = min(taxable_amount, bound)

    return tax_owed


def marginal_rate(taxable_amount: float, brackets: Iterable[BracketLike]) -> float:
    """Rate of the bracket containing taxable_amount (top rate as fallback)."""
    rate = 0.0
    for bracket in brackets:
        bound, rate = _normalize(bracket)
        if taxable_amount <= bound:
            return rate
    return rate
