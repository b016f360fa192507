import re
from typing import Optional, Union

DEFAULT_DEPTH = 1
MAX_DEPTH = 10
DEFAULT_HOPS = 1
MAX_HOPS = 5

LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def clamp_int(raw: Optional[Union[str, int]], default: int, maximum: int) -> int:
    """
    Parse a raw query value into [1, maximum].

    Only the leading integer counts, so "3abc" and "2.9" read as 3 and 2.
    Missing, unparsable and values below 1 fall back to the default;
    values above the maximum are capped.
    """
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    else:
        match = LEADING_INT_RE.match(raw)
        if match is None:
            return default
        value = int(match.group(1))
    if value < 1:
        return default
    return min(value, maximum)


def clamp_depth(raw: Optional[Union[str, int]]) -> int:
    return clamp_int(raw, DEFAULT_DEPTH, MAX_DEPTH)


def clamp_hops(raw: Optional[Union[str, int]]) -> int:
    return clamp_int(raw, DEFAULT_HOPS, MAX_HOPS)
