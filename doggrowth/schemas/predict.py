from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from doggrowth.growth.chart import ChartSpec


class GrowthPredictRequest(BaseModel):
    breed: str
    sex: str  # "Male" | "Female"
    age_input_mode: str = "slider"  # "slider" | "birthdate"
    current_age_weeks: Optional[float] = None
    birthdate: Optional[date] = None
    current_weight_lbs: float


class QueryOut(BaseModel):
    breed: str
    sex: str
    current_age_weeks: float
    current_weight_lbs: float


class CurvePoint(BaseModel):
    age_weeks: int
    predicted_weight: float
    ci_low: float
    ci_high: float


class WarningOut(BaseModel):
    kind: str
    message: str


class GrowthPredictResponse(BaseModel):
    query: QueryOut
    scaling_factor: float
    typical_weight_at_current_age: float
    adjusted_curve: List[CurvePoint]
    warnings: List[WarningOut] = Field(default_factory=list)
    chart: ChartSpec
    figure: dict[str, Any]
