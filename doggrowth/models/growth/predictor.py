"""
Posterior-predictive evaluation of a fitted von Bertalanffy growth model.

    weight = Linf * (1 - exp(-K * (age - t0)))

Linf, K and t0 each have a population intercept plus random intercepts for
``breed`` and ``breed:sex``. The posterior comes as a table of draws using
brms ``as_draws_df`` column names::

    b_Linf_Intercept, sd_breed__Linf_Intercept, sd_breed:sex__Linf_Intercept,
    r_breed__Linf[Labrador Retriever,Intercept],
    r_breed:sex__Linf[Labrador Retriever_Male,Intercept], ..., sigma

Level names may use brms' dotted form ("Labrador.Retriever") or the plain name.
"""
import re
from abc import ABC, abstractmethod

import numpy as np
import pandas as pd

PARAMETERS = ("Linf", "K", "t0")
PREDICTION_COLUMNS = ["estimate", "ci_low", "ci_high"]

_RANDOM_EFFECT = re.compile(r"^r_(breed|breed:sex)__(Linf|K|t0)\[(.+),Intercept\]$")


def _level_key(name: str) -> str:
    return name.strip().replace(" ", ".")


def bertalanffy(age, linf, k, t0):
    return linf * (1 - np.exp(-k * (age - t0)))


class GrowthModel(ABC):
    """Weight prediction for (age_weeks, breed, sex) rows."""

    @abstractmethod
    def predict(self, newdata: pd.DataFrame, allow_new_levels: bool = True) -> pd.DataFrame:
        """
        Args:
            newdata: DataFrame with columns ['age_weeks', 'breed', 'sex']
            allow_new_levels: predict breeds/sexes absent from the fitted data

        Returns:
            DataFrame aligned with ``newdata`` with columns
            ['estimate', 'ci_low', 'ci_high'] (95% prediction interval, lbs)
        """
        ...

    @abstractmethod
    def levels(self) -> list[str]:
        """Breeds present in the fitted data."""
        ...


class BertalanffyGrowthModel(GrowthModel):
    """
    Growth model backed by posterior draws.

    Unseen breed or breed:sex levels get a fresh random effect per draw from
    Normal(0, sd) of that grouping term, so their intervals widen and the
    estimate can be unstable, especially for K and t0.
    """

    def __init__(
        self,
        draws: pd.DataFrame,
        seed: int = 2023,
        interval_probs: tuple[float, float] = (0.025, 0.975),
    ):
        missing = [c for c in self.required_columns() if c not in draws.columns]
        if missing:
            raise ValueError(f"Posterior draws missing columns: {missing}")
        if draws.empty:
            raise ValueError("Posterior draws are empty")

        self.n_draws = len(draws)
        self.seed = seed
        self.interval_probs = interval_probs

        self._b = {p: draws[f"b_{p}_Intercept"].to_numpy(dtype=float) for p in PARAMETERS}
        self._sd_breed = {p: draws[f"sd_breed__{p}_Intercept"].to_numpy(dtype=float) for p in PARAMETERS}
        self._sd_breed_sex = {p: draws[f"sd_breed:sex__{p}_Intercept"].to_numpy(dtype=float) for p in PARAMETERS}
        self._sigma = draws["sigma"].to_numpy(dtype=float)

        # {term: {param: {level_key: draws}}}
        self._r = {"breed": {p: {} for p in PARAMETERS}, "breed:sex": {p: {} for p in PARAMETERS}}
        self._breed_names = {}
        for column in draws.columns:
            match = _RANDOM_EFFECT.match(column)
            if not match:
                continue
            term, param, level = match.groups()
            self._r[term][param][_level_key(level)] = draws[column].to_numpy(dtype=float)
            if term == "breed":
                self._breed_names.setdefault(_level_key(level), level if " " in level else level.replace(".", " "))

    @staticmethod
    def required_columns() -> list[str]:
        columns = []
        for p in PARAMETERS:
            columns += [f"b_{p}_Intercept", f"sd_breed__{p}_Intercept", f"sd_breed:sex__{p}_Intercept"]
        return columns + ["sigma"]

    def levels(self) -> list[str]:
        return sorted(self._breed_names.values())

    def _random_effect(self, term: str, param: str, level: str, sd: dict, rng, allow_new_levels: bool):
        effect = self._r[term][param].get(_level_key(level))
        if effect is not None:
            return effect
        if not allow_new_levels:
            raise ValueError(f"Level '{level}' of '{term}' not found in the fitted data")
        return rng.normal(0.0, sd[param])

    def _parameter_draws(self, breed: str, sex: str, rng, allow_new_levels: bool) -> dict:
        values = {}
        for p in PARAMETERS:
            values[p] = (
                self._b[p]
                + self._random_effect("breed", p, breed, self._sd_breed, rng, allow_new_levels)
                + self._random_effect("breed:sex", p, f"{breed}_{sex}", self._sd_breed_sex, rng, allow_new_levels)
            )
        return values

    def predict(self, newdata: pd.DataFrame, allow_new_levels: bool = True) -> pd.DataFrame:
        rng = np.random.default_rng(self.seed)
        result = pd.DataFrame(index=newdata.index, columns=PREDICTION_COLUMNS, dtype=float)
        low_q, high_q = self.interval_probs

        for (breed, sex), rows in newdata.groupby(["breed", "sex"], sort=False):
            params = self._parameter_draws(str(breed), str(sex), rng, allow_new_levels)
            ages = rows["age_weeks"].to_numpy(dtype=float)

            # (draws, ages)
            mu = bertalanffy(
                ages[None, :],
                params["Linf"][:, None],
                params["K"][:, None],
                params["t0"][:, None],
            )
            samples = mu + rng.normal(0.0, 1.0, size=mu.shape) * self._sigma[:, None]

            result.loc[rows.index, "estimate"] = samples.mean(axis=0)
            result.loc[rows.index, "ci_low"] = np.quantile(samples, low_q, axis=0)
            result.loc[rows.index, "ci_high"] = np.quantile(samples, high_q, axis=0)

        return result
