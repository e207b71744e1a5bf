"""
Shared fixtures: deterministic stand-ins for the fitted growth model.
"""
import numpy as np
import pandas as pd
import pytest

from doggrowth.core.config import Settings
from doggrowth.growth.query import Query, Sex
from doggrowth.models.growth.predictor import GrowthModel


class CurveOracle(GrowthModel):
    """Returns estimate = f(age) with a fixed-width band of +/- ``half_width``."""

    def __init__(self, estimate=lambda age: 20.0 + age, half_width=10.0, breeds=("Labrador Retriever",)):
        self.estimate = estimate
        self.half_width = half_width
        self.breeds = list(breeds)
        self.calls = 0

    def predict(self, newdata, allow_new_levels=True):
        self.calls += 1
        est = np.array([self.estimate(a) for a in newdata["age_weeks"]], dtype=float)
        return pd.DataFrame({
            "estimate": est,
            "ci_low": est - self.half_width,
            "ci_high": est + self.half_width,
        }, index=newdata.index)

    def levels(self):
        return self.breeds


class FailingOracle(GrowthModel):
    def predict(self, newdata, allow_new_levels=True):
        raise RuntimeError("sampler exploded")

    def levels(self):
        return ["Labrador Retriever"]


@pytest.fixture
def linear_oracle():
    # Scenario curve: estimate 80 (band 70..90) at 60 weeks
    return CurveOracle()


@pytest.fixture
def failing_oracle():
    return FailingOracle()


@pytest.fixture
def make_oracle():
    return CurveOracle


@pytest.fixture
def lab_query():
    return Query(breed="Labrador Retriever", sex=Sex.MALE, current_age=60, current_weight=85)


@pytest.fixture
def test_settings():
    return Settings(age_grid_policy="adaptive", oracle_timeout_seconds=None)


@pytest.fixture
def raw_for():
    """Build a RawPrediction aligned with a grid from an estimate function."""

    def _raw(grid, estimate, half_width=10.0):
        est = np.array([estimate(a) for a in grid["age_weeks"]], dtype=float)
        return pd.DataFrame({"estimate": est, "ci_low": est - half_width, "ci_high": est + half_width})

    return _raw
