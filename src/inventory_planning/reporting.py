"""Portfolio views over processed products."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
import math

from .forecasting import DEFAULT_HORIZON
from .products import ProcessedProduct

ORDER_NOW = "Immediate"
ORDER_NOW_FIRST_MONTH = "Immediate (M1)"
NOT_APPLICABLE = "N/A"


@dataclass(frozen=True)
class PortfolioMetrics:
    total_products: int
    low_stock_count: int
    total_order_qty: float
    total_stock_value: float
    total_revenue: float
    total_lost_revenue: float


@dataclass(frozen=True)
class StockoutRiskItem:
    sku: str
    name: str
    order_qty: float
    order_month: str
    order_cost: float
    revenue_lost: float
    stockout_month: int | None = None


def calculate_portfolio_metrics(
    products: Sequence[ProcessedProduct],
) -> PortfolioMetrics:
    return PortfolioMetrics(
        total_products=len(products),
        low_stock_count=sum(1 for product in products if product.stockout_risk),
        total_order_qty=sum(product.order_qty for product in products),
        total_stock_value=sum(product.stock * product.price for product in products),
        total_revenue=sum(product.revenue_sold for product in products),
        total_lost_revenue=sum(product.revenue_lost for product in products),
    )


def project_monthly_revenue(
    products: Iterable[ProcessedProduct],
    *,
    horizon: int = DEFAULT_HORIZON,
) -> dict[str, float]:
    """Revenue from projected sold units per forecast month ``m1..mN``."""
    monthly = {f"m{month}": 0.0 for month in range(1, horizon + 1)}
    for product in products:
        for index, units in enumerate(product.sold_units[:horizon]):
            monthly[f"m{index + 1}"] += units * product.price
    return monthly


def first_stockout_month(projected_stock: Sequence[int]) -> int | None:
    """1-indexed month in which projected stock first reaches zero."""
    for index, level in enumerate(projected_stock):
        if level <= 0:
            return index + 1
    return None


def suggest_order_month(
    stockout_month: int | None,
    months_to_hold: float,
    *,
    stockout_risk: bool,
) -> str:
    """Order ``months_to_hold`` months ahead of the first stockout."""
    if stockout_month is not None:
        order_month = math.floor(stockout_month - months_to_hold)
        if order_month <= 1:
            return ORDER_NOW_FIRST_MONTH
        return f"Month {order_month}"
    if stockout_risk:
        return ORDER_NOW
    return NOT_APPLICABLE


def build_stockout_risk_list(
    products: Iterable[ProcessedProduct],
    months_to_hold: float,
) -> list[StockoutRiskItem]:
    """Products at risk or losing sales, most lost revenue first."""
    items = []
    for product in products:
        if not product.stockout_risk and not any(
            units > 0 for units in product.lost_units
        ):
            continue
        stockout_month = first_stockout_month(product.projected_stock)
        items.append(
            StockoutRiskItem(
                sku=product.sku,
                name=product.name,
                order_qty=product.order_qty,
                order_month=suggest_order_month(
                    stockout_month,
                    months_to_hold,
                    stockout_risk=product.stockout_risk,
                ),
                order_cost=product.order_qty * product.unit_cost,
                revenue_lost=product.revenue_lost,
                stockout_month=stockout_month,
            )
        )
    items.sort(key=lambda item: -item.revenue_lost)
    return items


def processed_products_to_dicts(
    products: Iterable[ProcessedProduct],
) -> list[dict[str, object]]:
    """Flatten processed products into dictionaries; series become lists."""
    return [
        {
            "sku": product.sku,
            "name": product.name,
            "stock": product.stock,
            "price": product.price,
            "cost": product.cost,
            "unit_cost": product.unit_cost,
            "history": list(product.history),
            "clean_history": list(product.clean_history),
            "inbounds": list(product.inbounds),
            "oos_flags": list(product.oos_flags),
            "forecasts": list(product.forecasts),
            "trend": product.trend,
            "model_used": product.model_used,
            "accuracy": product.accuracy,
            "avg_demand": product.avg_demand,
            "target_stock": product.target_stock,
            "order_qty": product.order_qty,
            "days_of_cover": product.days_of_cover,
            "projected_stock": list(product.projected_stock),
            "sold_units": list(product.sold_units),
            "lost_units": list(product.lost_units),
            "stockout_risk": product.stockout_risk,
            "revenue_sold": product.revenue_sold,
            "revenue_lost": product.revenue_lost,
            "cost_of_goods": product.cost_of_goods,
            "projected_inbound_value": product.projected_inbound_value,
            "sell_through_rate": product.sell_through_rate,
            "abc_rank": product.abc_rank,
            "error": product.error,
        }
        for product in products
    ]


def processed_products_to_dataframe(
    products: Iterable[ProcessedProduct],
    *,
    library: str = "pandas",
):
    """Convert processed products into a pandas or polars DataFrame."""
    data = processed_products_to_dicts(products)
    if library == "pandas":
        try:
            import pandas as pd  # type: ignore
        except ModuleNotFoundError as exc:
            raise ModuleNotFoundError(
                "pandas is required for processed_products_to_dataframe(library='pandas')."
            ) from exc
        return pd.DataFrame(data)
    if library == "polars":
        try:
            import polars as pl  # type: ignore
        except ModuleNotFoundError as exc:
            raise ModuleNotFoundError(
                "polars is required for processed_products_to_dataframe(library='polars')."
            ) from exc
        return pl.DataFrame(data)
    raise ValueError("library must be 'pandas' or 'polars'.")
