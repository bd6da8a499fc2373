"""Month-by-month inventory depletion with lost sales."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .series import round_half_up


@dataclass(frozen=True)
class MonthSnapshot:
    period: int
    starting_stock: float
    inbound: float
    demand: float
    sold: int
    lost: int
    ending_stock: int


@dataclass(frozen=True)
class SimulationSummary:
    total_demand: float
    total_sold: int
    total_lost: int
    total_inbound: float
    fill_rate: float


@dataclass(frozen=True)
class SimulationResult:
    projected_stock: tuple[int, ...]
    sold_units: tuple[int, ...]
    lost_units: tuple[int, ...]
    snapshots: Sequence[MonthSnapshot] = ()
    summary: SimulationSummary | None = None


@dataclass(frozen=True)
class ProductFinancials:
    revenue_sold: float
    revenue_lost: float
    cost_of_goods: float
    projected_inbound_value: float
    sell_through_rate: float


def calculate_inventory_simulation(
    current_stock: float,
    forecasts: Sequence[float],
    inbounds: Sequence[float],
) -> SimulationResult:
    """Consume forecast demand against stock plus same-month inbound supply.

    Inbound for a month is available before that month's demand. Demand that
    cannot be met is lost, not backordered, and stock never goes negative.
    """
    running_stock = current_stock
    snapshots: list[MonthSnapshot] = []
    projected_stock: list[int] = []
    sold_units: list[int] = []
    lost_units: list[int] = []

    total_demand = 0.0
    total_inbound = 0.0

    for period, demand in enumerate(forecasts):
        supply = inbounds[period] if period < len(inbounds) else 0
        supply = supply or 0
        starting_stock = running_stock
        total_available = running_stock + supply

        if total_available >= demand:
            sales = demand
            lost = 0
            running_stock = total_available - demand
        else:
            sales = max(0, total_available)
            lost = demand - sales
            running_stock = 0

        total_demand += demand
        total_inbound += supply
        projected_stock.append(round_half_up(running_stock))
        sold_units.append(round_half_up(sales))
        lost_units.append(round_half_up(lost))
        snapshots.append(
            MonthSnapshot(
                period=period,
                starting_stock=starting_stock,
                inbound=supply,
                demand=demand,
                sold=sold_units[-1],
                lost=lost_units[-1],
                ending_stock=projected_stock[-1],
            )
        )

    total_sold = sum(sold_units)
    summary = SimulationSummary(
        total_demand=total_demand,
        total_sold=total_sold,
        total_lost=sum(lost_units),
        total_inbound=total_inbound,
        fill_rate=total_sold / total_demand if total_demand else 1.0,
    )
    return SimulationResult(
        projected_stock=tuple(projected_stock),
        sold_units=tuple(sold_units),
        lost_units=tuple(lost_units),
        snapshots=snapshots,
        summary=summary,
    )


def calculate_financials(
    *,
    current_stock: float,
    price: float,
    unit_cost: float,
    simulation: SimulationResult,
    inbounds: Sequence[float],
) -> ProductFinancials:
    total_sold = sum(simulation.sold_units)
    total_lost = sum(simulation.lost_units)
    total_inbound = sum(inbounds)
    total_supply = current_stock + total_inbound
    sell_through_rate = total_sold / total_supply * 100 if total_supply > 0 else 0.0
    return ProductFinancials(
        revenue_sold=total_sold * price,
        revenue_lost=total_lost * price,
        cost_of_goods=total_sold * unit_cost,
        projected_inbound_value=total_inbound * unit_cost,
        sell_through_rate=sell_through_rate,
    )


def is_stockout_risk(current_stock: float, target_stock: float) -> bool:
    return current_stock <= target_stock * 0.5
