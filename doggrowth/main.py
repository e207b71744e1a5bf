import logging
import threading
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse

from doggrowth.api.v1.router import api_router
from doggrowth.core.config import settings
from doggrowth.core.errors import DegenerateScaling, GrowthPredictionError, InvalidQuery, OracleFailure
from doggrowth.models.growth.loader import load_growth_model

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

ERROR_STATUS = {
    InvalidQuery: 422,
    DegenerateScaling: 422,
    OracleFailure: 503,
}

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(
    api_router,
    prefix="/api/v1"
)


@app.exception_handler(GrowthPredictionError)
async def growth_error_handler(request: Request, exc: GrowthPredictionError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    if status_code >= 500:
        logger.error("%s on %s: %s", exc.kind, request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", exc.kind, request.url.path, exc.message)
    body = {"detail": exc.message, "error": exc.kind}
    if isinstance(exc, InvalidQuery):
        body["problems"] = exc.problems
    return JSONResponse(status_code=status_code, content=body)


@app.on_event("startup")
def startup_event():
    """
    Load the growth model in a background thread so startup doesn't block.
    A failed load is logged; requests retry the load on demand and the
    reload endpoint can be used once the file is in place.
    """

    def _load():
        try:
            load_growth_model(settings.model_path, settings.posterior_seed, settings.interval_probs)
        except Exception:
            logger.exception("Growth model load failed")

    t = threading.Thread(target=_load, daemon=True)
    t.start()


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")


@app.get("/health", tags=["Health"])
def health_check():
    return {
        "status": "ok",
        "environment": settings.app_env
    }
