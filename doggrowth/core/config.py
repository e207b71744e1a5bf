from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Dog Growth Prediction Service"
    app_env: str = "development"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # Posterior draws of the fitted growth model (brms as_draws_df layout)
    model_path: str = "artifacts/growth_model_draws.csv"
    # Seed for the posterior-predictive noise and unseen-level effects
    posterior_seed: int = 2023
    interval_probs: tuple[float, float] = (0.025, 0.975)
    # Breeds missing from the fitted data are predicted from the population level
    allow_new_breeds: bool = True
    oracle_timeout_seconds: float | None = 30.0

    # "adaptive" rounds the current age up to the next hundred weeks,
    # "fixed" always predicts up to fixed_max_age_weeks
    age_grid_policy: Literal["adaptive", "fixed"] = "adaptive"
    fixed_max_age_weeks: int = 100

    discrepancy_low: float = 0.5
    discrepancy_high: float = 1.5
    rate_min: float = -1.0
    rate_max: float = 10.0

    model_config = SettingsConfigDict(
        env_prefix="DOGGROWTH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()
