"""Target stock and order quantity from the near-term forecast."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from .series import mean, round_half_up

AVERAGING_MONTHS = 3
DAYS_PER_MONTH = 30
NO_DEMAND_DAYS_OF_COVER = 999


@dataclass(frozen=True)
class OrderingResult:
    avg_demand: int
    target_stock: int
    order_qty: float
    days_of_cover: int


def calculate_ordering(
    forecasts: Sequence[float],
    current_stock: float,
    months_to_hold: float,
    po_order_cycle: float,
) -> OrderingResult:
    """Order enough to cover the holding months plus one order cycle.

    ``target = avg * months_to_hold + avg * po_order_cycle`` where ``avg`` is
    the mean of the first three forecast months. ``avg_demand`` is reported
    rounded; the target uses the unrounded mean. ``order_qty`` is not rounded,
    so a fractional stock gives a fractional order. Days of cover fall back
    to 999 when there is no demand or the ratio overflows.
    """
    avg_demand = mean(list(forecasts)[:AVERAGING_MONTHS])
    target_stock = round_half_up(
        avg_demand * months_to_hold + avg_demand * po_order_cycle
    )
    order_qty = max(0, target_stock - current_stock)

    daily_demand = avg_demand / DAYS_PER_MONTH
    days_of_cover = NO_DEMAND_DAYS_OF_COVER
    if daily_demand > 0:
        cover = current_stock / daily_demand
        if math.isfinite(cover):
            days_of_cover = round_half_up(cover)

    return OrderingResult(
        avg_demand=round_half_up(avg_demand),
        target_stock=target_stock,
        order_qty=order_qty,
        days_of_cover=days_of_cover,
    )
