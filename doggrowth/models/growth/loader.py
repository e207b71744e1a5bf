import logging
import threading
from pathlib import Path

import pandas as pd

from doggrowth.models.growth.predictor import BertalanffyGrowthModel

logger = logging.getLogger(__name__)

# In-memory registry
_GROWTH_MODELS: dict[str, BertalanffyGrowthModel] = {}
_lock = threading.Lock()


def load_growth_model(
    model_path: str,
    seed: int = 2023,
    interval_probs: tuple[float, float] = (0.025, 0.975),
    reload: bool = False,
) -> BertalanffyGrowthModel:
    """
    Load and cache the growth model from its posterior draws file.
    """
    with _lock:
        if not reload and model_path in _GROWTH_MODELS:
            return _GROWTH_MODELS[model_path]

        path = Path(model_path)
        logger.info("Loading growth model from: %s", path)

        if not path.exists():
            raise FileNotFoundError(f"Growth model not found: {path}")

        draws = pd.read_csv(path)
        model = BertalanffyGrowthModel(draws, seed=seed, interval_probs=interval_probs)
        logger.info("Loaded %d posterior draws covering %d breeds", model.n_draws, len(model.levels()))

        _GROWTH_MODELS[model_path] = model
        return model


def is_loaded(model_path: str) -> bool:
    return model_path in _GROWTH_MODELS
