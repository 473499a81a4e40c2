"""Property values and their structural equality.

Element properties are open-ended JSON-like values: str, int, float, bool,
None, lists and dicts nested to any depth. Two values are equal when their
canonical forms are equal. The canonical form tags every node with its kind,
so ``True`` never equals ``1`` and ``"1"`` never equals ``1``, while ``1`` and
``1.0`` compare equal and dict key order is irrelevant.
"""

import math
from typing import Any, Dict, List, Tuple, Union

PropertyValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]


class _Missing:
    """Marker for a property that does not exist on one side of a diff."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


MISSING = _Missing()


def is_missing(value: Any) -> bool:
    """Check whether a value is the absent-property marker."""
    return value is MISSING


def canonicalize(value: Any) -> Tuple:
    """
    Build the canonical, hashable form of a property value.

    Args:
        value: Property value

    Returns:
        Kind-tagged tuple

    Raises:
        TypeError: If the value is not JSON-like
    """
    if value is None:
        return ("null",)
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, int):
        return ("num", value)
    if isinstance(value, float):
        # Integral floats fold onto ints so 3 == 3.0
        if math.isfinite(value) and value.is_integer():
            return ("num", int(value))
        return ("num", value)
    if isinstance(value, str):
        return ("str", value)
    if isinstance(value, (list, tuple)):
        return ("array", tuple(canonicalize(item) for item in value))
    if isinstance(value, dict):
        items = sorted((str(k), canonicalize(v)) for k, v in value.items())
        return ("object", tuple(items))
    raise TypeError(f"Unsupported property value type: {type(value).__name__}")


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality of two property values; MISSING only equals MISSING."""
    if a is MISSING or b is MISSING:
        return a is b
    if a is b and not isinstance(a, float):
        return True
    return canonicalize(a) == canonicalize(b)
