import math

import pandas as pd

from doggrowth.growth.query import Query

ADAPTIVE = "adaptive"
FIXED = "fixed"


def grid_upper_bound(current_age: float, policy: str = ADAPTIVE, fixed_max_age: int = 100) -> int:
    """Last age (weeks) to predict for."""
    if policy == FIXED:
        return int(fixed_max_age)
    if policy == ADAPTIVE:
        return int(math.ceil(current_age / 100) * 100)
    raise ValueError(f"unknown age grid policy: {policy}")


def build_covariate_grid(query: Query, policy: str = ADAPTIVE, fixed_max_age: int = 100) -> pd.DataFrame:
    """Every whole week from birth to the upper bound, paired with the dog's breed and sex."""
    max_age = grid_upper_bound(query.current_age, policy, fixed_max_age)
    grid = pd.DataFrame({"age_weeks": range(0, max_age + 1)})
    grid["breed"] = query.breed
    grid["sex"] = query.sex.value
    return grid
