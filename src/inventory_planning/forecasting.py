"""Monthly demand forecasting models."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .series import coerce_number, mean, round_half_up

MODEL_AUTO = "AUTO"
MODEL_SMA = "SMA"
MODEL_WMA = "WMA"
MODEL_REGRESSION = "REGRESSION"
MODEL_HOLT = "HOLT"

# Backtest and tie-break order.
FORECAST_MODELS = (MODEL_SMA, MODEL_WMA, MODEL_REGRESSION, MODEL_HOLT)

DEFAULT_HORIZON = 6
DEFAULT_ALPHA = 0.5
DEFAULT_BETA = 0.3

_MODEL_ALIASES = {
    MODEL_AUTO: MODEL_AUTO,
    "AUTOMATIC": MODEL_AUTO,
    MODEL_SMA: MODEL_SMA,
    "MOVING_AVERAGE": MODEL_SMA,
    "SIMPLE_MOVING_AVERAGE": MODEL_SMA,
    MODEL_WMA: MODEL_WMA,
    "WEIGHTED_MOVING_AVERAGE": MODEL_WMA,
    MODEL_REGRESSION: MODEL_REGRESSION,
    "LINEAR": MODEL_REGRESSION,
    "LINEAR_REGRESSION": MODEL_REGRESSION,
    "OLS": MODEL_REGRESSION,
    MODEL_HOLT: MODEL_HOLT,
    "EXPONENTIAL_SMOOTHING": MODEL_HOLT,
    "DOUBLE_EXPONENTIAL_SMOOTHING": MODEL_HOLT,
}

Forecast = tuple[tuple[int, ...], float]


@dataclass(frozen=True)
class ForecastResult:
    forecasts: tuple[int, ...]
    trend: float
    model_used: str
    accuracy: float = 0.0


def normalize_model_type(model_type: str | None) -> str:
    if model_type is None:
        return MODEL_HOLT
    normalized = model_type.strip().upper().replace("-", "_").replace(" ", "_")
    if normalized in _MODEL_ALIASES:
        return _MODEL_ALIASES[normalized]
    raise ValueError(
        "model_type must be one of: "
        f"{', '.join(sorted(name.lower() for name in _MODEL_ALIASES))}."
    )


def apply_uplifts(
    raw: Sequence[float], uplifts: Mapping[str, float] | None = None
) -> tuple[int, ...]:
    """Scale month ``h`` by its ``m{h}`` uplift and clamp to whole units."""
    uplifts = uplifts or {}
    forecasts = []
    for index, value in enumerate(raw):
        uplift_pct = coerce_number(uplifts.get(f"m{index + 1}", 0))
        forecasts.append(max(0, round_half_up(value * (1 + uplift_pct / 100))))
    return tuple(forecasts)


def forecast_sma(
    history: Sequence[float],
    horizon: int,
    uplifts: Mapping[str, float] | None = None,
    *,
    period: int = 3,
) -> Forecast:
    relevant = list(history)[-period:] if period > 0 else []
    average = mean(relevant)
    return apply_uplifts([average] * horizon, uplifts), 0.0


def forecast_wma(
    history: Sequence[float],
    horizon: int,
    uplifts: Mapping[str, float] | None = None,
) -> Forecast:
    if len(history) < 3:
        return forecast_sma(history, horizon, uplifts, period=len(history))
    oldest, previous, latest = list(history)[-3:]
    weighted = latest * 0.5 + previous * 0.3 + oldest * 0.2
    return apply_uplifts([weighted] * horizon, uplifts), 0.0


def forecast_regression(
    history: Sequence[float],
    horizon: int,
    uplifts: Mapping[str, float] | None = None,
) -> Forecast:
    n = len(history)
    sum_x = sum_y = sum_xy = sum_x2 = 0.0
    for x, y in enumerate(history):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        last = history[-1] if n else 0.0
        return apply_uplifts([last] * horizon, uplifts), 0.0

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    raw = [slope * (n + step) + intercept for step in range(horizon)]
    return apply_uplifts(raw, uplifts), slope


def forecast_holt(
    history: Sequence[float],
    horizon: int,
    uplifts: Mapping[str, float] | None = None,
    *,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
) -> Forecast:
    """Double exponential smoothing (Holt's linear trend method)."""
    if not history:
        return apply_uplifts([0.0] * horizon, uplifts), 0.0

    level = history[0]
    trend = 0.0
    if len(history) > 1:
        trend = history[1] - history[0]
        level = history[1]
    for x in history[2:]:
        previous_level = level
        previous_trend = trend
        level = alpha * x + (1 - alpha) * (previous_level + previous_trend)
        trend = beta * (level - previous_level) + (1 - beta) * previous_trend

    raw = [level + step * trend for step in range(1, horizon + 1)]
    return apply_uplifts(raw, uplifts), trend


def run_model(
    model: str,
    history: Sequence[float],
    horizon: int,
    uplifts: Mapping[str, float] | None = None,
    *,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
) -> Forecast:
    """Forecast with one concrete model; ``AUTO`` is not accepted here."""
    if model not in FORECAST_MODELS:
        raise ValueError(
            f"'{model}' is not a concrete forecast model; "
            "resolve AUTO with find_best_model first."
        )
    history = list(history)
    if not history:
        return tuple(0 for _ in range(horizon)), 0.0
    if model == MODEL_SMA:
        return forecast_sma(history, horizon, uplifts)
    if model == MODEL_WMA:
        return forecast_wma(history, horizon, uplifts)
    if model == MODEL_REGRESSION:
        return forecast_regression(history, horizon, uplifts)
    return forecast_holt(history, horizon, uplifts, alpha=alpha, beta=beta)


def calculate_forecast(
    history: Sequence[float],
    model_type: str | None = MODEL_HOLT,
    *,
    horizon: int = DEFAULT_HORIZON,
    uplifts: Mapping[str, float] | None = None,
    alpha: float = DEFAULT_ALPHA,
    beta: float = DEFAULT_BETA,
) -> ForecastResult:
    """Resolve the model, forecast ``horizon`` months and score the fit.

    ``AUTO`` picks the model with the lowest holdout WMAPE and reports that
    score as the accuracy; a manually chosen model is backtested with the
    caller's smoothing constants instead.
    """
    from .selection import backtest_accuracy, find_best_model

    if horizon < 0:
        raise ValueError("Horizon cannot be negative.")
    model = normalize_model_type(model_type)
    history = list(history)

    if model == MODEL_AUTO:
        selection = find_best_model(history)
        model = selection.best_model
        accuracy = selection.wmape
    else:
        accuracy = backtest_accuracy(history, model, alpha=alpha, beta=beta)

    forecasts, trend = run_model(
        model, history, horizon, uplifts, alpha=alpha, beta=beta
    )
    return ForecastResult(
        forecasts=forecasts,
        trend=trend,
        model_used=model,
        accuracy=accuracy,
    )
