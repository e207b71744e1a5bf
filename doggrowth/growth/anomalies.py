from enum import Enum

import numpy as np
import pandas as pd


class WarningKind(str, Enum):
    NEGATIVE_TREND = "NegativeTrend"
    WEIGHT_DISCREPANCY = "WeightDiscrepancy"
    UNREALISTIC_RATE = "UnrealisticRate"


def trend_slope(curve: pd.DataFrame) -> float | None:
    """Least-squares slope of predicted weight on age, or None with fewer than two points."""
    if len(curve) < 2:
        return None
    slope, _ = np.polyfit(
        curve["age_weeks"].to_numpy(dtype=float),
        curve["predicted_weight"].to_numpy(dtype=float),
        1,
    )
    return float(slope)


def growth_rates(curve: pd.DataFrame) -> np.ndarray:
    """Weight change per week between consecutive rows."""
    weights = curve["predicted_weight"].to_numpy(dtype=float)
    ages = curve["age_weeks"].to_numpy(dtype=float)
    return np.diff(weights) / np.diff(ages)


def has_negative_trend(curve: pd.DataFrame) -> bool:
    slope = trend_slope(curve)
    return slope is not None and slope < 0


def has_weight_discrepancy(scaling_factor: float, low: float = 0.5, high: float = 1.5) -> bool:
    return scaling_factor > high or scaling_factor < low


def has_unrealistic_rate(curve: pd.DataFrame, rate_min: float = -1.0, rate_max: float = 10.0) -> bool:
    rates = growth_rates(curve)
    return bool(np.any(rates < rate_min) or np.any(rates > rate_max))


def check_anomalies(
    curve: pd.DataFrame,
    scaling_factor: float,
    discrepancy_low: float = 0.5,
    discrepancy_high: float = 1.5,
    rate_min: float = -1.0,
    rate_max: float = 10.0,
) -> frozenset[WarningKind]:
    warnings = set()
    if has_negative_trend(curve):
        warnings.add(WarningKind.NEGATIVE_TREND)
    if has_weight_discrepancy(scaling_factor, discrepancy_low, discrepancy_high):
        warnings.add(WarningKind.WEIGHT_DISCREPANCY)
    if has_unrealistic_rate(curve, rate_min, rate_max):
        warnings.add(WarningKind.UNREALISTIC_RATE)
    return frozenset(warnings)
