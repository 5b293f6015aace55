"""
Claim values carried by a verified token.
"""

import math
from typing import Dict, List, Union

ClaimValue = Union[str, int, float, bool, None, Dict[str, "ClaimValue"], List["ClaimValue"]]
ClaimSet = Dict[str, ClaimValue]


def claim_as_int(value: ClaimValue) -> int:
    """Coerce a numeric claim to whole seconds.

    Accepts integers, floats (truncated) and numeric strings. Raises
    ValueError for anything else, booleans included.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a numeric claim")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"non-finite numeric claim: {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text, 10)
        except ValueError:
            return claim_as_int(float(text))
    raise ValueError(f"not a numeric claim: {type(value).__name__}")


def claim_as_number(value: ClaimValue) -> float:
    """Coerce a numeric claim without dropping fractional seconds.

    Same accepted shapes as :func:`claim_as_int`.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not a numeric claim")
    if not isinstance(value, (int, float, str)):
        raise ValueError(f"not a numeric claim: {type(value).__name__}")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except OverflowError as exc:
        raise ValueError(f"numeric claim out of range: {value!r}") from exc
    if not math.isfinite(number):
        raise ValueError(f"non-finite numeric claim: {value!r}")
    return number
