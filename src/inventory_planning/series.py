"""Numeric helpers and out-of-stock history imputation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
import numbers
import math
import statistics


def round_half_up(value: float) -> int:
    """Round to the nearest integer, sending .5 upwards."""
    return int(math.floor(value + 0.5))


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return statistics.fmean(values)


def std_dev(values: Iterable[float]) -> float:
    """Sample standard deviation; 0 for fewer than two points."""
    values = list(values)
    if len(values) < 2:
        return 0.0
    return statistics.stdev(values)


def _is_missing_value(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float):
        return not math.isfinite(value)
    return False


def coerce_number(value: object) -> float | int:
    """Read a numeric field, treating anything unreadable as 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, (numbers.Real, Decimal)):
        parsed = float(value)
        return 0 if _is_missing_value(parsed) else parsed
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return 0
        return 0 if _is_missing_value(parsed) else parsed
    return 0


def _is_series(values: object) -> bool:
    if isinstance(values, (str, bytes, Mapping)):
        return False
    return hasattr(values, "__len__") and hasattr(values, "__iter__")


def coerce_series(values: object, *, length: int) -> tuple[float | int, ...] | None:
    """Read a fixed-length numeric series, or ``None`` when the shape is wrong.

    Any sized iterable other than a string or mapping is accepted, so numpy
    arrays and pandas series read the same as lists.
    """
    if not _is_series(values) or len(values) != length:
        return None
    return tuple(coerce_number(value) for value in values)


def coerce_flags(values: object, *, length: int) -> tuple[bool, ...]:
    if not _is_series(values) or len(values) != length:
        return tuple(False for _ in range(length))
    return tuple(bool(value) for value in values)


def impute_history(
    history: Sequence[float],
    oos_flags: Sequence[bool] | None = None,
) -> list[float]:
    """Replace stocked-out months with the mean of the reliable months.

    Flags beyond the end of ``oos_flags`` count as "not stocked out".
    """
    flags = list(oos_flags) if oos_flags is not None else []

    def flagged(index: int) -> bool:
        return index < len(flags) and bool(flags[index])

    valid_points = [
        value for index, value in enumerate(history) if not flagged(index)
    ]
    fallback = mean(valid_points)
    return [
        fallback if flagged(index) else value
        for index, value in enumerate(history)
    ]
