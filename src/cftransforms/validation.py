"""Parameter validation for Cloudflare transform values.

Every function here is pure: it either returns the (normalized) value or
raises InvalidTransformParameterError carrying the parameter name and the
violated bound or set. Nothing is clamped or silently coerced.
"""

import re
from enum import Enum
from typing import Any, Iterable, TypeVar

from cftransforms.constants import QUALITY_MAX, QUALITY_MIN
from cftransforms.enums import Gravity, Quality
from cftransforms.exceptions import InvalidTransformParameterError

E = TypeVar("E", bound=Enum)

# "XxY" focal point, each component in [0, 1]. Trailing zeros after "1." are accepted.
GRAVITY_COORDINATE_PATTERN = re.compile(r"(0|0\.\d+|1|1\.0*)x(0|0\.\d+|1|1\.0*)")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_range(
    value: int | float,
    minimum: int | float,
    maximum: int | float,
    name: str,
    integer: bool = False,
) -> int | float:
    """Check that a number lies in the closed interval [minimum, maximum].

    Args:
        value: Candidate value
        minimum: Lower bound (inclusive)
        maximum: Upper bound (inclusive)
        name: Human-readable parameter name used in the error message
        integer: If True, only int values are accepted

    Returns:
        The value unchanged

    Raises:
        InvalidTransformParameterError: If the value is not a number or is out of range
    """
    if not _is_number(value) or (integer and not isinstance(value, int)):
        kind = "an integer" if integer else "a number"
        raise InvalidTransformParameterError(
            f"{name} must be {kind}, got {value!r}",
            context={"parameter": name},
        )
    if value < minimum or value > maximum:
        raise InvalidTransformParameterError.out_of_range(name, minimum, maximum)
    return value


def validate_membership(value: Any, allowed: Iterable[Any], name: str) -> Any:
    """Check that a value is one of an allowed set using strict equality.

    Strict means the types must match as well: 90.0 and "90" are not 90,
    and True is not 1.
    """
    allowed = tuple(allowed)
    for candidate in allowed:
        if type(value) is type(candidate) and value == candidate:
            return value
    raise InvalidTransformParameterError.not_in_set(name, allowed)


def validate_equals(value: Any, expected: str, name: str) -> str:
    """Check that a value equals the single literal currently supported."""
    if not isinstance(value, str) or value != expected:
        raise InvalidTransformParameterError.not_equal(name, expected)
    return value


def validate_non_negative(value: int, name: str) -> int:
    """Check that an integer is 0 or greater."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidTransformParameterError(
            f"{name} must be an integer, got {value!r}",
            context={"parameter": name},
        )
    if value < 0:
        raise InvalidTransformParameterError(
            f"{name} must be 0 or greater",
            context={"parameter": name, "value": value},
        )
    return value


def coerce_enum(enum_class: type[E], value: E | str, name: str) -> E:
    """Parse a member or its string value into an enum member.

    Raises:
        InvalidTransformParameterError: If the value is not a valid member
    """
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except ValueError:
        raise InvalidTransformParameterError.not_in_set(
            name, (member.value for member in enum_class)
        ) from None


def validate_gravity(value: Gravity | str) -> str:
    """Validate a gravity focal point.

    Accepts a Gravity member (or its string value) or an "XxY" coordinate
    pair where X and Y are between 0.0 and 1.0, e.g. "0.5x0.33".

    Returns:
        The normalized gravity string

    Raises:
        InvalidTransformParameterError: On any other shape
    """
    if isinstance(value, Gravity):
        return value.value
    if isinstance(value, str):
        try:
            return Gravity(value).value
        except ValueError:
            pass
        if GRAVITY_COORDINATE_PATTERN.fullmatch(value):
            return value
    raise InvalidTransformParameterError(
        'Invalid gravity coordinate format. Expected "XxY" where X and Y are '
        "between 0.0 and 1.0",
        context={"parameter": "Gravity", "value": value},
    )


def normalize_quality(value: Quality | int, name: str = "Quality") -> str:
    """Resolve a quality tier or a raw 1-100 integer into its string form."""
    if isinstance(value, Quality):
        return value.value
    if isinstance(value, str):
        return coerce_enum(Quality, value, name).value
    validate_range(value, QUALITY_MIN, QUALITY_MAX, name, integer=True)
    return str(value)


def format_number(value: int | float) -> str:
    """Render a number the way Cloudflare expects it in a URL.

    Integral floats lose their fractional part (1.0 -> "1").
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
