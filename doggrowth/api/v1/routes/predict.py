import logging
import os

from fastapi import APIRouter, Depends

from doggrowth.api.v1.response_formatter import ABOUT_TEXT, DISCLAIMER_TEXT, format_prediction
from doggrowth.core.config import settings
from doggrowth.core.errors import OracleFailure
from doggrowth.growth.pipeline import predict_growth
from doggrowth.growth.query import validate_query
from doggrowth.growth.trajectory import FIXED
from doggrowth.models.growth.loader import is_loaded, load_growth_model
from doggrowth.models.growth.predictor import GrowthModel
from doggrowth.schemas.predict import GrowthPredictRequest, GrowthPredictResponse

logger = logging.getLogger(__name__)

router = APIRouter()

last_load_error: str | None = None


def get_growth_model() -> GrowthModel:
    """Cached growth model; loads it on first use if startup has not yet."""
    global last_load_error
    try:
        model = load_growth_model(settings.model_path, settings.posterior_seed, settings.interval_probs)
    except Exception as e:
        last_load_error = str(e)
        raise OracleFailure(f"growth model unavailable: {e}") from e
    last_load_error = None
    return model


@router.get("/breeds")
def list_breeds(model: GrowthModel = Depends(get_growth_model)):
    return {"breeds": model.levels(), "allow_new_breeds": settings.allow_new_breeds}


@router.get("/about")
def about():
    return {"about": ABOUT_TEXT, "disclaimer": DISCLAIMER_TEXT}


@router.get("/predict-growth/status")
def predict_growth_status():
    """Return whether the growth model is loaded and whether its file exists."""
    return {
        "model_loaded": is_loaded(settings.model_path),
        "model_path": settings.model_path,
        "model_file_exists": os.path.exists(settings.model_path),
        "age_grid_policy": settings.age_grid_policy,
        "error": last_load_error,
    }


@router.post("/predict-growth/reload")
def predict_growth_reload():
    """Reload the growth model from disk. Returns load success and any error."""
    global last_load_error
    try:
        load_growth_model(settings.model_path, settings.posterior_seed, settings.interval_probs, reload=True)
        last_load_error = None
    except Exception as e:
        logger.exception("Growth model reload failed")
        last_load_error = str(e)
    return {"model_loaded": last_load_error is None, "model_path": settings.model_path, "error": last_load_error}


@router.post("/predict-growth", response_model=GrowthPredictResponse)
def predict_dog_growth(req: GrowthPredictRequest, model: GrowthModel = Depends(get_growth_model)):
    query = validate_query(
        breed=req.breed,
        sex=req.sex,
        current_weight=req.current_weight_lbs,
        age_input_mode=req.age_input_mode,
        current_age=req.current_age_weeks,
        birthdate=req.birthdate,
        known_breeds=model.levels(),
        allow_new_breeds=settings.allow_new_breeds,
        max_age=settings.fixed_max_age_weeks if settings.age_grid_policy == FIXED else None,
    )
    logger.info("Predicting growth for %s (%s), %.1f weeks, %.2f lbs",
                query.breed, query.sex.value, query.current_age, query.current_weight)

    prediction = predict_growth(query, model, settings)
    return format_prediction(prediction)
