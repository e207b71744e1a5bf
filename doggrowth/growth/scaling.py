"""
Rescale a population growth curve so it passes through one dog's reported weight.

The whole curve (estimate and both interval bounds) is multiplied by
``current_weight / estimate_at(current_age)``, then rows with any non-positive
value are dropped. Dropping is the only clipping policy: callers must not
assume the adjusted curve has the same length as the grid.
"""
import logging
import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from doggrowth.core.errors import DegenerateScaling
from doggrowth.growth.query import Query

logger = logging.getLogger(__name__)

RAW_COLUMNS = ["estimate", "ci_low", "ci_high"]
CURVE_COLUMNS = ["age_weeks", "predicted_weight", "ci_low", "ci_high"]


@dataclass(frozen=True)
class ScaledTrajectory:
    curve: pd.DataFrame
    scaling_factor: float
    typical_weight: float  # unscaled estimate at the current age


def reference_age(current_age: float) -> int:
    # Fractional ages (from a birth date) use the whole week they fall in
    return int(math.floor(current_age))


def reference_estimate(grid: pd.DataFrame, raw: pd.DataFrame, current_age: float) -> float:
    age = reference_age(current_age)
    rows = np.flatnonzero(grid["age_weeks"].to_numpy() == age)
    if len(rows) == 0:
        raise DegenerateScaling(f"cannot scale: age {age} is outside the prediction grid")
    return float(raw["estimate"].iloc[rows[0]])


def scaling_factor_for(reference: float, current_weight: float) -> float:
    if not math.isfinite(reference):
        raise DegenerateScaling("cannot scale: non-finite reference prediction")
    if reference == 0:
        raise DegenerateScaling("cannot scale: zero reference prediction")
    if reference < 0:
        raise DegenerateScaling("cannot scale: negative reference prediction")
    return current_weight / reference


def clip_non_positive(curve: pd.DataFrame) -> pd.DataFrame:
    keep = (curve["predicted_weight"] > 0) & (curve["ci_low"] > 0) & (curve["ci_high"] > 0)
    return curve.loc[keep].reset_index(drop=True)


def scale_prediction(grid: pd.DataFrame, raw: pd.DataFrame, query: Query) -> ScaledTrajectory:
    typical = reference_estimate(grid, raw, query.current_age)
    factor = scaling_factor_for(typical, query.current_weight)

    scaled = raw[RAW_COLUMNS].to_numpy(dtype=float) * factor
    curve = pd.DataFrame({
        "age_weeks": grid["age_weeks"].to_numpy(),
        "predicted_weight": scaled[:, 0],
        "ci_low": scaled[:, 1],
        "ci_high": scaled[:, 2],
    })

    clipped = clip_non_positive(curve)
    dropped = len(curve) - len(clipped)
    if dropped:
        logger.debug("Dropped %d non-positive rows from the adjusted curve", dropped)
    if clipped.empty:
        raise DegenerateScaling("cannot scale: no positive predictions remain")

    return ScaledTrajectory(curve=clipped, scaling_factor=factor, typical_weight=typical)
