"""
Fixed-point helpers.

All reward math is integer-only with truncating division. Rounding always
goes toward zero so the ledger can never promise more than it holds.
"""

from __future__ import annotations

from rewardledger.constants import SCALE
from rewardledger.exceptions import ArithmeticUnderflowError


def mul_div(a: int, b: int, denominator: int) -> int:
    """Return ``a * b // denominator`` for non-negative operands."""
    if denominator <= 0:
        raise ZeroDivisionError("denominator must be positive")
    if a < 0 or b < 0:
        raise ArithmeticUnderflowError(f"negative operand in mul_div: {a}, {b}")
    return a * b // denominator


def checked_sub(a: int, b: int, what: str = "value") -> int:
    """Subtract *b* from *a*, failing fast instead of going negative."""
    if b > a:
        raise ArithmeticUnderflowError(f"{what} underflow: {a} - {b}")
    return a - b


def scale_up(amount: int, denominator: int) -> int:
    """Express *amount* per unit of *denominator* at ``SCALE`` precision."""
    return mul_div(amount, SCALE, denominator)


def scale_down(value: int, factor: int) -> int:
    """Apply a scaled *factor* to *value*, truncating the result."""
    return mul_div(value, factor, SCALE)
