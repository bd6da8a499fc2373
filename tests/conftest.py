import pytest

from inventory_planning import ProcessedProduct


def _make_processed(sku="A", revenue_sold=0.0, **overrides):
    values = {
        "sku": sku,
        "name": f"Product {sku}",
        "stock": 0,
        "price": 10.0,
        "cost": None,
        "unit_cost": 6.0,
        "history": (),
        "inbounds": (0, 0, 0, 0, 0, 0),
        "oos_flags": (False,) * 12,
        "clean_history": (),
        "forecasts": (0, 0, 0, 0, 0, 0),
        "trend": 0.0,
        "model_used": "SMA",
        "accuracy": 0.0,
        "avg_demand": 0,
        "target_stock": 0,
        "order_qty": 0,
        "days_of_cover": 999,
        "projected_stock": (0, 0, 0, 0, 0, 0),
        "sold_units": (0, 0, 0, 0, 0, 0),
        "lost_units": (0, 0, 0, 0, 0, 0),
        "stockout_risk": False,
        "revenue_sold": revenue_sold,
        "revenue_lost": 0.0,
        "cost_of_goods": 0.0,
        "projected_inbound_value": 0.0,
        "sell_through_rate": 0.0,
    }
    values.update(overrides)
    return ProcessedProduct(**values)


@pytest.fixture
def make_processed():
    return _make_processed
