"""Small numeric validation helpers shared by option parsing."""

from __future__ import annotations

from numbers import Real


def check_number(value: object, *, param_name: str = "parameter") -> float:
    """Return `value` as float, rejecting bools and non-numeric types."""

    if not isinstance(value, Real) or isinstance(value, bool):
        raise TypeError(f"{param_name} must be a number, got {type(value).__name__}")
    return float(value)


def check_range(
    value: object,
    low: float | None = None,
    high: float | None = None,
    *,
    param_name: str = "parameter",
    include_low: bool = True,
) -> float:
    """Validate `value` lies in ``[low, high]`` (or ``(low, high]``).

    Either bound may be `None` to leave that side open. Returns the value as
    a float so callers can store the normalized number directly.
    """

    number = check_number(value, param_name=param_name)
    if number != number:
        raise ValueError(f"{param_name} must not be NaN")

    if low is not None:
        if include_low and number < low:
            raise ValueError(f"{param_name} must be >= {low}, got {value}")
        if not include_low and number <= low:
            raise ValueError(f"{param_name} must be > {low}, got {value}")

    if high is not None and number > high:
        raise ValueError(f"{param_name} must be <= {high}, got {value}")

    return number


def check_unit_interval(value: object, *, param_name: str = "parameter") -> float:
    """Validate a fraction in ``[0.0, 1.0]``."""

    return check_range(value, 0.0, 1.0, param_name=param_name)
