"""Forecast error scoring and holdout-based model selection."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .forecasting import (
    DEFAULT_ALPHA,
    DEFAULT_BETA,
    FORECAST_MODELS,
    MODEL_HOLT,
    MODEL_SMA,
    run_model,
)
from .series import round_half_up

HOLDOUT_MONTHS = 3
MIN_BACKTEST_POINTS = 6


@dataclass(frozen=True)
class ModelSelection:
    best_model: str
    wmape: float
    scores: Mapping[str, float] = field(default_factory=dict)


def calculate_wmape(actuals: Sequence[float], forecasts: Sequence[float]) -> float:
    """Weighted mean absolute percentage error, in percent.

    Only the overlapping prefix is scored. Empty input or all-zero actuals
    score 0.
    """
    if not actuals or not forecasts:
        return 0.0
    count = min(len(actuals), len(forecasts))
    sum_abs_error = 0.0
    sum_actual = 0.0
    for index in range(count):
        sum_abs_error += abs(actuals[index] - forecasts[index])
        sum_actual += abs(actuals[index])
    if sum_actual == 0:
        return 0.0
    return sum_abs_error / sum_actual * 100


def _split_holdout(history: Sequence[float]) -> tuple[list[float], list[float]]:
    values = list(history)
    return values[:-HOLDOUT_MONTHS], values[-HOLDOUT_MONTHS:]


def find_best_model(history: Sequence[float]) -> ModelSelection:
    """Backtest every model on the last three months and keep the best.

    Uplifts are left out so they cannot bias the comparison, and HOLT runs
    with the default smoothing constants. Ties keep the earlier model in
    ``FORECAST_MODELS``.
    """
    if len(history) < MIN_BACKTEST_POINTS:
        return ModelSelection(best_model=MODEL_SMA, wmape=0.0)

    train, test = _split_holdout(history)
    scores: dict[str, float] = {}
    best_model = MODEL_SMA
    min_error = float("inf")
    for model in FORECAST_MODELS:
        forecasts, _ = run_model(
            model,
            train,
            HOLDOUT_MONTHS,
            alpha=DEFAULT_ALPHA,
            beta=DEFAULT_BETA,
        )
        error = calculate_wmape(test, forecasts)
        scores[model] = error
        if error < min_error:
            min_error = error
            best_model = model

    return ModelSelection(
        best_model=best_model,
        wmape=round_half_up(min_error * 10) / 10,
        scores=scores,
    )


def backtest_accuracy(
    history: Sequence[float],
    model: str = MODEL_HOLT,
    *,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
) -> float:
    """Holdout WMAPE of a manually chosen model with the caller's constants."""
    if len(history) < MIN_BACKTEST_POINTS:
        return 0.0
    train, test = _split_holdout(history)
    forecasts, _ = run_model(
        model, train, HOLDOUT_MONTHS, alpha=alpha, beta=beta
    )
    return round_half_up(calculate_wmape(test, forecasts) * 10) / 10
