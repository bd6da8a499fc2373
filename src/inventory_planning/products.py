"""Product input records and the per-product planning output."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import math

from .series import coerce_flags, coerce_number, coerce_series

HISTORY_MONTHS = 12
INBOUND_MONTHS = 6
DEFAULT_COST_RATIO = 0.6


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return math.isnan(value)
    return False


def _coalesce_value(row: Mapping[str, object], *fields: str) -> object | None:
    for field in fields:
        if field in row and not _is_missing(row[field]):
            return row[field]
    return None


@dataclass(frozen=True)
class Product:
    sku: str
    name: str = ""
    stock: float = 0
    price: float = 0.0
    cost: float | None = None
    history: tuple[float, ...] = ()
    inbounds: tuple[float, ...] = (0,) * INBOUND_MONTHS
    oos_flags: tuple[bool, ...] = (False,) * HISTORY_MONTHS

    @property
    def unit_cost(self) -> float:
        """Unit cost, or 60% of price when no cost was supplied."""
        if self.cost is None:
            return self.price * DEFAULT_COST_RATIO
        return self.cost

    @classmethod
    def from_mapping(cls, row: Mapping[str, object]) -> "Product":
        """Build a product from a loosely shaped record.

        Accepts snake_case or camelCase keys. History, inbounds and
        out-of-stock flags that are not sequences of the expected length fall
        back to empty history, zero inbounds and no flags.
        """
        history = coerce_series(row.get("history"), length=HISTORY_MONTHS)
        inbounds = coerce_series(row.get("inbounds"), length=INBOUND_MONTHS)
        cost = _coalesce_value(row, "cost", "unit_cost", "unitCost")
        return cls(
            sku=str(_coalesce_value(row, "sku", "unique_id") or ""),
            name=str(_coalesce_value(row, "name") or ""),
            stock=coerce_number(_coalesce_value(row, "stock", "current_stock")),
            price=coerce_number(_coalesce_value(row, "price")),
            cost=None if cost is None else coerce_number(cost),
            history=history if history is not None else (),
            inbounds=(
                inbounds if inbounds is not None else (0,) * INBOUND_MONTHS
            ),
            oos_flags=coerce_flags(
                _coalesce_value(row, "oos_flags", "oosFlags"),
                length=HISTORY_MONTHS,
            ),
        )


@dataclass(frozen=True)
class ProcessedProduct:
    sku: str
    name: str
    stock: float
    price: float
    cost: float | None
    unit_cost: float
    history: tuple[float, ...]
    inbounds: tuple[float, ...]
    oos_flags: tuple[bool, ...]
    clean_history: tuple[float, ...]
    forecasts: tuple[int, ...]
    trend: float
    model_used: str
    accuracy: float
    avg_demand: int
    target_stock: int
    order_qty: float
    days_of_cover: int
    projected_stock: tuple[int, ...]
    sold_units: tuple[int, ...]
    lost_units: tuple[int, ...]
    stockout_risk: bool
    revenue_sold: float
    revenue_lost: float
    cost_of_goods: float
    projected_inbound_value: float
    sell_through_rate: float
    abc_rank: str | None = None
    error: str | None = None
