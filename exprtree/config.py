from __future__ import annotations
import os
from typing import Optional


# Defaults
DEFAULT_MAX_DEPTH = 200


def int_from_env(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"{var} must be at least 1, got {value}")
    return value


def get_max_depth(override: Optional[int] = None) -> int:
    """Depth limit for tree walks: an explicit override, else EXPRTREE_MAX_DEPTH, else the default.

    Walks recurse on the Python stack; running out of stack is reported as
    DepthLimitExceeded too.
    """
    if override is not None:
        if override < 1:
            raise ValueError(f"max_depth must be at least 1, got {override}")
        return override
    return int_from_env("EXPRTREE_MAX_DEPTH", DEFAULT_MAX_DEPTH)
