"""Global planning policy shared by every product in a run."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import math

from .forecasting import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    DEFAULT_HORIZON,
    MODEL_HOLT,
    normalize_model_type,
)
from .series import coerce_number

MIN_UPLIFT_PCT = -100.0
MAX_UPLIFT_PCT = 1000.0


def _is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and not math.isnan(value)
    )


def model_param_errors(alpha: object, beta: object) -> list[str]:
    errors = []
    if not _is_number(alpha) or not 0 <= alpha <= 1:
        errors.append("Alpha must be between 0 and 1.")
    if not _is_number(beta) or not 0 <= beta <= 1:
        errors.append("Beta must be between 0 and 1.")
    return errors


def ordering_param_errors(po_order_cycle: object, months_to_hold: object) -> list[str]:
    errors = []
    if not _is_number(po_order_cycle) or po_order_cycle <= 0:
        errors.append("PO order cycle must be positive.")
    if not _is_number(months_to_hold) or months_to_hold <= 0:
        errors.append("Months to hold must be positive.")
    return errors


def default_uplifts(horizon: int = DEFAULT_HORIZON) -> dict[str, float]:
    return {f"m{month}": 0.0 for month in range(1, horizon + 1)}


def sanitize_uplifts(uplifts: Mapping[str, object] | None) -> dict[str, float]:
    """Clamp uplift percentages to [-100, 1000]; unreadable values become 0."""
    sanitized = default_uplifts()
    for key, value in (uplifts or {}).items():
        sanitized[str(key)] = float(
            max(MIN_UPLIFT_PCT, min(MAX_UPLIFT_PCT, coerce_number(value)))
        )
    return sanitized


@dataclass(frozen=True)
class PolicyConfig:
    """Forecast model choice, smoothing constants and ordering policy.

    ``po_order_cycle`` is the months of pipeline cover and ``months_to_hold``
    the months of safety stock; both feed the target stock. ``alpha`` and
    ``beta`` only affect HOLT.
    """

    model_type: str = MODEL_HOLT
    alpha: float = DEFAULT_ALPHA
    beta: float = DEFAULT_BETA
    po_order_cycle: float = 1.0
    months_to_hold: float = 2.0
    uplifts: Mapping[str, float] = field(default_factory=default_uplifts)

    def __post_init__(self) -> None:
        object.__setattr__(self, "model_type", normalize_model_type(self.model_type))
        errors = model_param_errors(self.alpha, self.beta)
        errors.extend(ordering_param_errors(self.po_order_cycle, self.months_to_hold))
        if errors:
            raise ValueError(" ".join(errors))
        object.__setattr__(self, "uplifts", sanitize_uplifts(self.uplifts))
