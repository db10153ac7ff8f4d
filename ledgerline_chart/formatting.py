from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
import math

NBSP = "\u00a0"
CURRENCY_SYMBOL = "€"
GROUP_SEPARATOR = "."
# es-ES only groups thousands once the integer part has five or more digits.
MIN_GROUPING_DIGITS = 5
LABEL_ROUNDING_STEP = 100


def format_currency(amount: float) -> str:
    """Format an amount as es-ES euros with whole-unit precision, e.g. `12.500 €`.

    Rounding is display-only; callers keep the unrounded value.
    """

    if not math.isfinite(amount):
        return f"{amount}{NBSP}{CURRENCY_SYMBOL}"
    try:
        whole = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        whole = Decimal(int(amount))
    # The sign follows the unrounded amount, so -0.4 renders as "-0".
    negative = amount < 0
    digits = str(abs(int(whole)))
    if len(digits) >= MIN_GROUPING_DIGITS:
        digits = _group_thousands(digits)
    sign = "-" if negative else ""
    return f"{sign}{digits}{NBSP}{CURRENCY_SYMBOL}"


def round_to_step(value: float, step: float = LABEL_ROUNDING_STEP) -> float:
    """Round to the nearest multiple of `step`, halves away from zero."""

    if step <= 0:
        raise ValueError("step must be > 0")
    if not math.isfinite(value):
        return value
    q = (Decimal(str(value)) / Decimal(str(step))).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    out = float(q * Decimal(str(step)))
    return 0.0 if out == 0 else out


def format_axis_label(value: float) -> str:
    return format_currency(round_to_step(value))


def format_percentage(percentage: float) -> str:
    """One decimal, ties rounded away from zero on the exact binary value."""

    if not math.isfinite(percentage):
        return f"{percentage}%"
    try:
        tenths = Decimal(abs(percentage)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        tenths = Decimal(f"{abs(percentage):.1f}")
    sign = "-" if percentage < 0 else ""
    return f"{sign}{tenths}%"


def _group_thousands(digits: str) -> str:
    head = len(digits) % 3 or 3
    groups = [digits[:head]]
    groups.extend(digits[i : i + 3] for i in range(head, len(digits), 3))
    return GROUP_SEPARATOR.join(groups)
