"""Safe ratio primitive shared by every derived ratio in the package."""

from __future__ import annotations

from typing import Optional, Union

Number = Union[int, float]


def safe_ratio(numerator: Number, denominator: Number) -> Optional[float]:
    """Divide, returning None when the denominator is not positive.

    "No data" must never be confused with "ratio is exactly zero", so a zero,
    negative or NaN denominator yields None instead of 0.0, NaN or an error.

    Args:
        numerator: Dividend.
        denominator: Divisor.

    Returns:
        ``numerator / denominator`` as a float, or None.

    Examples:
        >>> safe_ratio(30, 120)
        0.25
        >>> safe_ratio(30, 0) is None
        True

    """
    if not denominator > 0:
        return None
    return float(numerator) / float(denominator)
