"""
One prediction request, start to finish:

    Query -> covariate grid -> growth model -> scaling & clipping
          -> anomaly checks -> chart spec

Every call is independent; nothing is kept between requests.
"""
import logging
import threading
from dataclasses import dataclass

import pandas as pd

from doggrowth.core.config import Settings, settings as default_settings
from doggrowth.core.errors import OracleFailure
from doggrowth.growth.anomalies import WarningKind, check_anomalies
from doggrowth.growth.chart import ChartSpec, build_chart_spec
from doggrowth.growth.query import Query
from doggrowth.growth.scaling import RAW_COLUMNS, scale_prediction
from doggrowth.growth.trajectory import build_covariate_grid
from doggrowth.models.growth.predictor import GrowthModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GrowthPrediction:
    query: Query
    curve: pd.DataFrame
    scaling_factor: float
    typical_weight: float
    warnings: frozenset[WarningKind]
    chart: ChartSpec


def _predict_in_thread(model: GrowthModel, grid: pd.DataFrame, timeout: float):
    """
    Run one prediction on its own daemon thread and wait up to ``timeout`` seconds.
    An abandoned call keeps running in the background but holds up no later request.
    """
    outcome = {}
    done = threading.Event()

    def _predict():
        try:
            outcome["raw"] = model.predict(grid, allow_new_levels=True)
        except Exception as e:
            outcome["error"] = e
        finally:
            done.set()

    t = threading.Thread(target=_predict, name="growth-oracle", daemon=True)
    t.start()
    if not done.wait(timeout):
        raise OracleFailure(f"growth model did not respond within {timeout} seconds")
    if "error" in outcome:
        raise OracleFailure(f"growth model failed: {outcome['error']}") from outcome["error"]
    return outcome["raw"]


def _call_oracle(model: GrowthModel, grid: pd.DataFrame, timeout: float | None) -> pd.DataFrame:
    if timeout is None:
        try:
            raw = model.predict(grid, allow_new_levels=True)
        except Exception as e:
            raise OracleFailure(f"growth model failed: {e}") from e
    else:
        raw = _predict_in_thread(model, grid, timeout)

    if not isinstance(raw, pd.DataFrame) or any(c not in raw.columns for c in RAW_COLUMNS):
        raise OracleFailure(f"growth model returned no {RAW_COLUMNS} columns")
    if len(raw) != len(grid):
        raise OracleFailure(f"growth model returned {len(raw)} rows for {len(grid)} ages")
    return raw.reset_index(drop=True)


def predict_growth(query: Query, model: GrowthModel, settings: Settings = default_settings) -> GrowthPrediction:
    grid = build_covariate_grid(query, settings.age_grid_policy, settings.fixed_max_age_weeks)
    raw = _call_oracle(model, grid, settings.oracle_timeout_seconds)

    scaled = scale_prediction(grid, raw, query)

    warnings = check_anomalies(
        scaled.curve,
        scaled.scaling_factor,
        discrepancy_low=settings.discrepancy_low,
        discrepancy_high=settings.discrepancy_high,
        rate_min=settings.rate_min,
        rate_max=settings.rate_max,
    )
    if warnings:
        logger.info("Prediction for %s (%s) raised warnings: %s",
                    query.breed, query.sex.value, sorted(w.value for w in warnings))

    chart = build_chart_spec(scaled.curve, query, scaled.typical_weight)

    return GrowthPrediction(
        query=query,
        curve=scaled.curve,
        scaling_factor=scaled.scaling_factor,
        typical_weight=scaled.typical_weight,
        warnings=warnings,
        chart=chart,
    )
