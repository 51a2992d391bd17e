from __future__ import annotations

from typing import NewType, Sequence

NumericResult = NewType("NumericResult", int)
FetchParameters = Sequence[int]

UINT256_MAX = 2**256 - 1


def to_numeric_result(value: int) -> NumericResult:
    """Wrap ``value`` as a NumericResult.

    A NumericResult is an unsigned fixed-point integer with 256 bits of range. It
    carries no unit; the caller knows which decimal exponent produced it.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"NumericResult must be an int, got {type(value).__name__}"
        raise TypeError(msg)
    if value < 0:
        msg = "NumericResult must be >= 0"
        raise ValueError(msg)
    if value > UINT256_MAX:
        msg = "NumericResult must fit in 256 bits"
        raise ValueError(msg)
    return NumericResult(value)


__all__ = ["FetchParameters", "NumericResult", "UINT256_MAX", "to_numeric_result"]
