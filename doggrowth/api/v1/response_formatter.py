from doggrowth.growth.anomalies import WarningKind
from doggrowth.growth.chart import figure_json
from doggrowth.growth.pipeline import GrowthPrediction
from doggrowth.schemas.predict import CurvePoint, GrowthPredictResponse, QueryOut, WarningOut

WARNING_MESSAGES = {
    WarningKind.NEGATIVE_TREND: "Warning: Negative trend detected in predicted weights.",
    WarningKind.WEIGHT_DISCREPANCY: "Warning: Significant discrepancy detected between current and typical weight.",
    WarningKind.UNREALISTIC_RATE: "Warning: Unrealistic growth rates detected.",
}

# Fixed display order for banners
WARNING_ORDER = [
    WarningKind.NEGATIVE_TREND,
    WarningKind.WEIGHT_DISCREPANCY,
    WarningKind.UNREALISTIC_RATE,
]

ABOUT_TEXT = (
    "This app predicts a dog's weight trajectory from its breed, sex, current age "
    "and current weight. Predictions come from a canine growth model based on the "
    "von Bertalanffy growth function, Linf * (1 - exp(-K * (age - t0))), where Linf "
    "is the asymptotic adult weight, K the growth rate and t0 the hypothetical age at "
    "which size is zero. The model was fitted in a Bayesian mixed-effects framework so "
    "that each parameter can vary by breed and by sex within breed. The population "
    "curve is rescaled to pass through your dog's current weight, and the shaded band "
    "shows the 95% prediction interval."
)

DISCLAIMER_TEXT = (
    "The growth model and this application are for informational and educational "
    "purposes only. The predictions are based on data that may not represent the growth "
    "of every breed or every dog; genetics, nutrition, health and environment all affect "
    "an individual dog's growth. Treat the predictions as general guidelines, not "
    "definitive outcomes, and consult a qualified veterinary professional if you have "
    "concerns about your dog's growth or health."
)


def format_warnings(warnings) -> list[WarningOut]:
    return [
        WarningOut(kind=kind.value, message=WARNING_MESSAGES[kind])
        for kind in WARNING_ORDER
        if kind in warnings
    ]


def format_prediction(prediction: GrowthPrediction) -> GrowthPredictResponse:
    query = prediction.query
    curve = [
        CurvePoint(
            age_weeks=int(row.age_weeks),
            predicted_weight=float(row.predicted_weight),
            ci_low=float(row.ci_low),
            ci_high=float(row.ci_high),
        )
        for row in prediction.curve.itertuples(index=False)
    ]
    return GrowthPredictResponse(
        query=QueryOut(
            breed=query.breed,
            sex=query.sex.value,
            current_age_weeks=query.current_age,
            current_weight_lbs=query.current_weight,
        ),
        scaling_factor=prediction.scaling_factor,
        typical_weight_at_current_age=prediction.typical_weight,
        adjusted_curve=curve,
        warnings=format_warnings(prediction.warnings),
        chart=prediction.chart,
        figure=figure_json(prediction.chart),
    )
