import pytest

import inventory_planning.engine as engine
from inventory_planning import PolicyConfig, Product, process, process_product

HISTORY = [12, 15, 18, 14, 16, 20, 17, 19, 22, 18, 21, 23]


def _products():
    return [
        {
            "sku": "IDLE",
            "name": "No history",
            "stock": 20,
            "price": 3.0,
            "history": "not a list",
            "inbounds": [0, 0, 0],
        },
        {
            "sku": "STEADY",
            "name": "Steady seller",
            "stock": 100,
            "price": 2.0,
            "history": [5] * 12,
            "inbounds": [0] * 6,
            "oos_flags": [False] * 12,
        },
        {
            "sku": "RUNNER",
            "name": "Fast runner",
            "stock": 45,
            "price": 10.0,
            "cost": 6.0,
            "history": HISTORY,
            "inbounds": [0, 10, 0, 0, 0, 0],
            "oos_flags": [False] * 12,
        },
    ]


def test_process_sorts_by_revenue_and_assigns_abc_ranks():
    results = process(_products(), PolicyConfig(model_type="SMA"))

    assert [product.sku for product in results] == ["RUNNER", "STEADY", "IDLE"]
    # 550 of 610 total revenue is already above the 80% A threshold.
    assert [product.abc_rank for product in results] == ["B", "C", "C"]


def test_process_plans_each_product():
    runner = process(_products(), PolicyConfig(model_type="SMA"))[0]

    assert runner.forecasts == (21, 21, 21, 21, 21, 21)
    assert runner.model_used == "SMA"
    assert runner.accuracy == 11.3
    assert runner.avg_demand == 21
    assert runner.target_stock == 63
    assert runner.order_qty == 18
    assert runner.days_of_cover == 64
    assert runner.projected_stock == (24, 13, 0, 0, 0, 0)
    assert runner.lost_units == (0, 0, 8, 21, 21, 21)
    assert not runner.stockout_risk
    assert runner.revenue_sold == pytest.approx(550.0)
    assert runner.cost_of_goods == pytest.approx(330.0)
    assert runner.error is None


def test_process_defaults_malformed_fields():
    results = {product.sku: product for product in process(_products(), PolicyConfig(model_type="SMA"))}
    idle = results["IDLE"]
    steady = results["STEADY"]

    assert idle.history == ()
    assert idle.inbounds == (0, 0, 0, 0, 0, 0)
    assert idle.oos_flags == (False,) * 12
    assert idle.forecasts == (0, 0, 0, 0, 0, 0)
    assert idle.days_of_cover == 999
    assert steady.unit_cost == pytest.approx(1.2)
    assert steady.revenue_sold == pytest.approx(60.0)


def test_process_imputes_stocked_out_months():
    flags = [False] * 11 + [True]
    product = Product(
        sku="OOS",
        stock=0,
        price=1.0,
        history=tuple([10] * 11 + [0]),
        oos_flags=tuple(flags),
    )

    result = process_product(product, PolicyConfig(model_type="SMA"))

    assert result.clean_history[-1] == 10
    assert result.forecasts == (10,) * 6


def test_process_accepts_camel_case_flags():
    record = {
        "sku": "CAMEL",
        "stock": 0,
        "price": 1.0,
        "history": [10] * 11 + [0],
        "oosFlags": [False] * 11 + [True],
    }

    result = process_product(record, PolicyConfig(model_type="SMA"))

    assert result.oos_flags[-1] is True
    assert result.forecasts[0] == 10


def test_process_auto_reports_resolved_model():
    results = process(_products(), PolicyConfig(model_type="AUTO"))

    for product in results:
        assert product.model_used in {"SMA", "WMA", "REGRESSION", "HOLT"}
    steady = next(product for product in results if product.sku == "STEADY")
    assert steady.model_used == "SMA"
    assert steady.forecasts == (5,) * 6


def test_process_applies_uplifts():
    config = PolicyConfig(model_type="SMA", uplifts={"m1": 100})
    steady = next(
        product for product in process(_products(), config) if product.sku == "STEADY"
    )

    assert steady.forecasts == (10, 5, 5, 5, 5, 5)


def test_forecast_failure_is_isolated_per_product(monkeypatch):
    original = engine.calculate_forecast

    def flaky_forecast(history, *args, **kwargs):
        if history and history[0] == 5:
            raise ZeroDivisionError("boom")
        return original(history, *args, **kwargs)

    monkeypatch.setattr(engine, "calculate_forecast", flaky_forecast)

    with pytest.warns(UserWarning, match="Forecasting failed for sku 'STEADY'"):
        results = process(_products(), PolicyConfig(model_type="SMA"))

    by_sku = {product.sku: product for product in results}
    steady = by_sku["STEADY"]
    assert steady.forecasts == (0,) * 6
    assert steady.trend == 0
    assert steady.accuracy == 0
    assert steady.error == "ZeroDivisionError: boom"
    assert by_sku["RUNNER"].forecasts == (21,) * 6
    assert by_sku["RUNNER"].error is None


def test_process_with_no_products():
    assert process([], PolicyConfig()) == []


def test_process_tolerates_non_mapping_items():
    results = process([None], PolicyConfig(model_type="SMA"))

    assert results[0].sku == ""
    assert results[0].forecasts == (0,) * 6


def test_policy_config_normalizes_and_validates():
    config = PolicyConfig(model_type="auto", uplifts={"m2": 5000, "m3": "x"})

    assert config.model_type == "AUTO"
    assert config.uplifts["m1"] == 0
    assert config.uplifts["m2"] == 1000
    assert config.uplifts["m3"] == 0

    with pytest.raises(ValueError, match="Alpha must be between 0 and 1"):
        PolicyConfig(alpha=1.5)
    with pytest.raises(ValueError, match="Months to hold must be positive"):
        PolicyConfig(months_to_hold=0)


def test_process_reads_numpy_arrays_and_scalars():
    np = pytest.importorskip("numpy")
    record = {
        "sku": "ARRAY",
        "stock": np.int64(45),
        "price": np.float64(10.0),
        "cost": 6.0,
        "history": np.array(HISTORY[:-1] + [0]),
        "inbounds": np.array([0, 10, 0, 0, 0, 0]),
        "oos_flags": np.array([False] * 11 + [True]),
    }

    results = process([record, *_products()], PolicyConfig(model_type="SMA"))

    array = next(product for product in results if product.sku == "ARRAY")
    assert array.error is None
    assert array.stock == 45
    assert array.inbounds == (0, 10, 0, 0, 0, 0)
    assert array.oos_flags[-1] is True
    assert array.clean_history[-1] == pytest.approx(sum(HISTORY[:-1]) / 11)
    assert len(results) == 4


def test_process_caps_days_of_cover_for_huge_stock():
    record = {"sku": "HUGE", "stock": 1.7e308, "price": 1.0, "history": HISTORY}

    result = process([record], PolicyConfig(model_type="SMA"))[0]

    assert result.days_of_cover == 999
    assert result.order_qty == 0
    assert result.error is None


def test_planning_failure_is_isolated_per_product():
    record = {
        "sku": "OVERFLOW",
        "stock": 1e308,
        "price": 1.0,
        "history": HISTORY,
        "inbounds": [1e308] * 6,
    }

    with pytest.warns(UserWarning, match="Planning failed for sku 'OVERFLOW'"):
        results = process([record, *_products()], PolicyConfig(model_type="SMA"))

    by_sku = {product.sku: product for product in results}
    failed = by_sku["OVERFLOW"]
    assert failed.error.startswith("OverflowError")
    assert failed.forecasts == (0,) * 6
    assert failed.projected_stock == (0,) * 6
    assert failed.days_of_cover == 999
    assert failed.revenue_sold == 0
    assert by_sku["RUNNER"].forecasts == (21,) * 6
    assert by_sku["RUNNER"].error is None
    assert [product.sku for product in results] == [
        "RUNNER", "STEADY", "OVERFLOW", "IDLE",
    ]
