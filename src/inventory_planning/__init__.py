"""Demand forecasting and inventory planning for retail SKUs."""

from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    from ._version import version as __version__
except ModuleNotFoundError:
    try:
        __version__ = _dist_version("inventory-planning")
    except PackageNotFoundError:
        __version__ = "0.0.0"

from .classification import (
    ABC_RANKS,
    TierSummary,
    abc_rank_for_share,
    classify_abc,
    summarize_tiers,
)
from .config import (
    PolicyConfig,
    model_param_errors,
    ordering_param_errors,
    sanitize_uplifts,
)
from .engine import ForecastOutcome, forecast_product, process, process_product
from .forecasting import (
    FORECAST_MODELS,
    MODEL_AUTO,
    MODEL_HOLT,
    MODEL_REGRESSION,
    MODEL_SMA,
    MODEL_WMA,
    ForecastResult,
    calculate_forecast,
    forecast_holt,
    forecast_regression,
    forecast_sma,
    forecast_wma,
    normalize_model_type,
)
from .ordering import OrderingResult, calculate_ordering
from .products import ProcessedProduct, Product
from .reporting import (
    PortfolioMetrics,
    StockoutRiskItem,
    build_stockout_risk_list,
    calculate_portfolio_metrics,
    processed_products_to_dataframe,
    processed_products_to_dicts,
    project_monthly_revenue,
)
from .selection import (
    ModelSelection,
    backtest_accuracy,
    calculate_wmape,
    find_best_model,
)
from .series import impute_history, std_dev
from .simulation import (
    MonthSnapshot,
    ProductFinancials,
    SimulationResult,
    SimulationSummary,
    calculate_financials,
    calculate_inventory_simulation,
)

__all__ = [
    "__version__",
    "ABC_RANKS",
    "FORECAST_MODELS",
    "MODEL_AUTO",
    "MODEL_HOLT",
    "MODEL_REGRESSION",
    "MODEL_SMA",
    "MODEL_WMA",
    "Product",
    "ProcessedProduct",
    "PolicyConfig",
    "ForecastResult",
    "ForecastOutcome",
    "ModelSelection",
    "OrderingResult",
    "MonthSnapshot",
    "SimulationResult",
    "SimulationSummary",
    "ProductFinancials",
    "TierSummary",
    "PortfolioMetrics",
    "StockoutRiskItem",
    "impute_history",
    "std_dev",
    "normalize_model_type",
    "forecast_sma",
    "forecast_wma",
    "forecast_regression",
    "forecast_holt",
    "calculate_forecast",
    "calculate_wmape",
    "find_best_model",
    "backtest_accuracy",
    "calculate_ordering",
    "calculate_inventory_simulation",
    "calculate_financials",
    "abc_rank_for_share",
    "classify_abc",
    "summarize_tiers",
    "model_param_errors",
    "ordering_param_errors",
    "sanitize_uplifts",
    "forecast_product",
    "process_product",
    "process",
    "calculate_portfolio_metrics",
    "project_monthly_revenue",
    "build_stockout_risk_list",
    "processed_products_to_dicts",
    "processed_products_to_dataframe",
]
