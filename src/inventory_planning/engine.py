"""Batch planning run: forecast, order, simulate and rank every product."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
import warnings

from .classification import classify_abc
from .config import PolicyConfig
from .forecasting import DEFAULT_HORIZON, ForecastResult, calculate_forecast
from .ordering import NO_DEMAND_DAYS_OF_COVER, calculate_ordering
from .products import ProcessedProduct, Product
from .series import impute_history
from .simulation import (
    calculate_financials,
    calculate_inventory_simulation,
    is_stockout_risk,
)


@dataclass(frozen=True)
class ForecastOutcome:
    """A product's forecast, or the degraded zero forecast and its error."""

    result: ForecastResult
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_product(item: Product | Mapping[str, object]) -> Product:
    if isinstance(item, Product):
        return Product.from_mapping(asdict(item))
    if isinstance(item, Mapping):
        return Product.from_mapping(item)
    return Product.from_mapping({})


def forecast_product(
    clean_history: list[float],
    config: PolicyConfig,
    *,
    horizon: int = DEFAULT_HORIZON,
) -> ForecastOutcome:
    try:
        result = calculate_forecast(
            clean_history,
            config.model_type,
            horizon=horizon,
            uplifts=config.uplifts,
            alpha=config.alpha,
            beta=config.beta,
        )
    except (ArithmeticError, ValueError, TypeError) as exc:
        return ForecastOutcome(
            result=ForecastResult(
                forecasts=tuple(0 for _ in range(horizon)),
                trend=0.0,
                model_used=config.model_type,
                accuracy=0.0,
            ),
            error=f"{type(exc).__name__}: {exc}",
        )
    return ForecastOutcome(result=result)


def process_product(
    item: Product | Mapping[str, object],
    config: PolicyConfig,
    *,
    horizon: int = DEFAULT_HORIZON,
) -> ProcessedProduct:
    """Plan a single product; ``abc_rank`` is left unset."""
    product = _as_product(item)
    clean_history = impute_history(product.history, product.oos_flags)

    outcome = forecast_product(clean_history, config, horizon=horizon)
    if not outcome.ok:
        warnings.warn(
            f"Forecasting failed for sku '{product.sku}'; "
            f"using a zero forecast ({outcome.error}).",
            stacklevel=2,
        )
    forecast = outcome.result

    ordering = calculate_ordering(
        forecast.forecasts,
        product.stock,
        config.months_to_hold,
        config.po_order_cycle,
    )
    simulation = calculate_inventory_simulation(
        product.stock, forecast.forecasts, product.inbounds
    )
    financials = calculate_financials(
        current_stock=product.stock,
        price=product.price,
        unit_cost=product.unit_cost,
        simulation=simulation,
        inbounds=product.inbounds,
    )

    return ProcessedProduct(
        sku=product.sku,
        name=product.name,
        stock=product.stock,
        price=product.price,
        cost=product.cost,
        unit_cost=product.unit_cost,
        history=product.history,
        inbounds=product.inbounds,
        oos_flags=product.oos_flags,
        clean_history=tuple(clean_history),
        forecasts=forecast.forecasts,
        trend=forecast.trend,
        model_used=forecast.model_used,
        accuracy=forecast.accuracy,
        avg_demand=ordering.avg_demand,
        target_stock=ordering.target_stock,
        order_qty=ordering.order_qty,
        days_of_cover=ordering.days_of_cover,
        projected_stock=simulation.projected_stock,
        sold_units=simulation.sold_units,
        lost_units=simulation.lost_units,
        stockout_risk=is_stockout_risk(product.stock, ordering.target_stock),
        revenue_sold=financials.revenue_sold,
        revenue_lost=financials.revenue_lost,
        cost_of_goods=financials.cost_of_goods,
        projected_inbound_value=financials.projected_inbound_value,
        sell_through_rate=financials.sell_through_rate,
        error=outcome.error,
    )


def _failed_product(
    item: Product | Mapping[str, object],
    config: PolicyConfig,
    error: str,
    *,
    horizon: int = DEFAULT_HORIZON,
) -> ProcessedProduct:
    """Zero plan for a product whose planning raised part way through."""
    try:
        product = _as_product(item)
    except (ValueError, TypeError):
        product = Product.from_mapping({})
    zeros = tuple(0 for _ in range(horizon))
    return ProcessedProduct(
        sku=product.sku,
        name=product.name,
        stock=product.stock,
        price=product.price,
        cost=product.cost,
        unit_cost=product.unit_cost,
        history=product.history,
        inbounds=product.inbounds,
        oos_flags=product.oos_flags,
        clean_history=product.history,
        forecasts=zeros,
        trend=0.0,
        model_used=config.model_type,
        accuracy=0.0,
        avg_demand=0,
        target_stock=0,
        order_qty=0,
        days_of_cover=NO_DEMAND_DAYS_OF_COVER,
        projected_stock=zeros,
        sold_units=zeros,
        lost_units=zeros,
        stockout_risk=False,
        revenue_sold=0.0,
        revenue_lost=0.0,
        cost_of_goods=0.0,
        projected_inbound_value=0.0,
        sell_through_rate=0.0,
        error=error,
    )


def process(
    products: Iterable[Product | Mapping[str, object]],
    config: PolicyConfig | None = None,
) -> list[ProcessedProduct]:
    """Plan every product and rank the portfolio.

    Products are independent until the ABC ranking, which needs the whole
    revenue set. A product whose planning raises is kept with a zero plan
    and its ``error`` set. The result is sorted by ``revenue_sold``
    descending.
    """
    if config is None:
        config = PolicyConfig()
    processed = []
    for item in products:
        try:
            processed.append(process_product(item, config))
        except (ArithmeticError, ValueError, TypeError) as exc:
            error = f"{type(exc).__name__}: {exc}"
            failed = _failed_product(item, config, error)
            warnings.warn(
                f"Planning failed for sku '{failed.sku}'; "
                f"using a zero plan ({error}).",
                stacklevel=2,
            )
            processed.append(failed)
    return classify_abc(processed)
