"""ABC classification by cumulative revenue share."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from .forecasting import DEFAULT_HORIZON
from .products import ProcessedProduct

RANK_A = "A"
RANK_B = "B"
RANK_C = "C"
ABC_RANKS = (RANK_A, RANK_B, RANK_C)

A_THRESHOLD_PCT = 80.0
B_THRESHOLD_PCT = 95.0


@dataclass(frozen=True)
class TierSummary:
    rank: str
    skus: tuple[str, ...]
    revenue_total: float
    stock_value: float
    stock_cost: float
    in_transit_cost: float
    avg_sell_through: float
    monthly_cost_of_goods: tuple[float, ...]

    @property
    def item_count(self) -> int:
        return len(self.skus)


def abc_rank_for_share(cumulative_share_pct: float) -> str:
    if cumulative_share_pct <= A_THRESHOLD_PCT:
        return RANK_A
    if cumulative_share_pct <= B_THRESHOLD_PCT:
        return RANK_B
    return RANK_C


def classify_abc(products: Iterable[ProcessedProduct]) -> list[ProcessedProduct]:
    """Rank products A/B/C by their inclusive cumulative share of revenue.

    Returns new records sorted by ``revenue_sold`` descending; equal revenue
    keeps the input order. A zero revenue total is treated as 1, which puts
    every product in ``A``.
    """
    ranked = sorted(products, key=lambda product: -(product.revenue_sold or 0))
    total_revenue = sum(product.revenue_sold or 0 for product in ranked) or 1

    classified = []
    running_revenue = 0.0
    for product in ranked:
        running_revenue += product.revenue_sold or 0
        share = running_revenue / total_revenue * 100
        classified.append(replace(product, abc_rank=abc_rank_for_share(share)))
    return classified


def summarize_tiers(
    products: Sequence[ProcessedProduct],
    *,
    horizon: int = DEFAULT_HORIZON,
) -> dict[str, TierSummary]:
    """Stock value, in-transit cost and monthly cost of goods per ABC tier."""
    summaries: dict[str, TierSummary] = {}
    for rank in ABC_RANKS:
        members = sorted(
            (product for product in products if product.abc_rank == rank),
            key=lambda product: -(product.stock * product.price),
        )
        monthly_cost_of_goods = [0.0] * horizon
        for product in members:
            for index, units in enumerate(product.sold_units[:horizon]):
                monthly_cost_of_goods[index] += units * product.unit_cost
        sell_through = [product.sell_through_rate for product in members]
        summaries[rank] = TierSummary(
            rank=rank,
            skus=tuple(product.sku for product in members),
            revenue_total=sum(product.revenue_sold for product in members),
            stock_value=sum(product.stock * product.price for product in members),
            stock_cost=sum(product.stock * product.unit_cost for product in members),
            in_transit_cost=sum(
                sum(product.inbounds) * product.unit_cost for product in members
            ),
            avg_sell_through=(
                sum(sell_through) / len(sell_through) if sell_through else 0.0
            ),
            monthly_cost_of_goods=tuple(monthly_cost_of_goods),
        )
    return summaries
