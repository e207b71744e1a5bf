"""
Chart assembly for an adjusted growth curve.

``build_chart_spec`` produces the renderer-independent data contract (band,
line, current-state marker, reference lines, per-point tooltips);
``to_plotly_figure`` turns it into a plotly figure for the web front end.
"""
import html
import json

import pandas as pd
import plotly.graph_objects as go
from pydantic import BaseModel

from doggrowth.growth.query import Query

LINE_COLOR = "#2980b9"
BAND_COLOR = "rgba(41, 128, 185, 0.25)"
MARKER_COLOR = "#e74c3c"


class ChartPoint(BaseModel):
    age_weeks: int
    predicted_weight: float
    ci_low: float
    ci_high: float


class Marker(BaseModel):
    age_weeks: float
    weight: float


class Tooltip(BaseModel):
    age_weeks: int
    predicted_weight: float
    ci_low: float
    ci_high: float
    breed: str
    sex: str
    current_age_weeks: float
    current_weight_lbs: float
    typical_weight_lbs: float


class ChartSpec(BaseModel):
    points: list[ChartPoint]
    marker: Marker
    reference_x: float
    reference_y: float
    x_range: tuple[float, float]
    y_range: tuple[float, float]
    x_title: str = "Age (weeks)"
    y_title: str = "Weight (lbs)"
    tooltips: list[Tooltip]


def y_axis_limit(curve: pd.DataFrame) -> float:
    # Headroom of 20 lbs above the curve, rounded to the nearest ten
    return float(round(curve["predicted_weight"].max() + 20, -1))


def build_chart_spec(curve: pd.DataFrame, query: Query, typical_weight: float) -> ChartSpec:
    points = [
        ChartPoint(
            age_weeks=int(row.age_weeks),
            predicted_weight=float(row.predicted_weight),
            ci_low=float(row.ci_low),
            ci_high=float(row.ci_high),
        )
        for row in curve.itertuples(index=False)
    ]
    tooltips = [
        Tooltip(
            **point.model_dump(),
            breed=query.breed,
            sex=query.sex.value,
            current_age_weeks=query.current_age,
            current_weight_lbs=query.current_weight,
            typical_weight_lbs=typical_weight,
        )
        for point in points
    ]
    return ChartSpec(
        points=points,
        marker=Marker(age_weeks=query.current_age, weight=query.current_weight),
        reference_x=query.current_age,
        reference_y=query.current_weight,
        x_range=(0.0, float(curve["age_weeks"].max())),
        y_range=(0.0, y_axis_limit(curve)),
        tooltips=tooltips,
    )


def hover_meta(spec: ChartSpec) -> list:
    """Static query details referenced as %{meta[i]} by the hover template."""
    tip = spec.tooltips[0]
    # Breed is free text; plotly renders HTML in substituted values
    return [
        html.escape(tip.breed),
        html.escape(tip.sex),
        tip.current_age_weeks,
        tip.current_weight_lbs,
        tip.typical_weight_lbs,
    ]


def hover_template() -> str:
    return (
        "<b>Age:</b> %{x:.0f} weeks"
        "<br><b>Predicted weight:</b> %{y:.2f} lbs"
        "<br>"
        "<br><b>95% Prediction interval:</b>"
        "<br> Lower: %{customdata[0]:.2f} lbs"
        "<br> Upper: %{customdata[1]:.2f} lbs"
        "<br>"
        "<br><b>Prediction for:</b>"
        "<br><b> Breed:</b> %{meta[0]} (%{meta[1]})"
        "<br><b> Current age:</b> %{meta[2]:.1f} weeks"
        "<br><b> Current weight:</b> %{meta[3]:.2f} lbs"
        "<br><b> Typical weight at current age:</b> %{meta[4]:.2f} lbs"
        "<extra></extra>"
    )


def to_plotly_figure(spec: ChartSpec) -> go.Figure:
    ages = [p.age_weeks for p in spec.points]
    weights = [p.predicted_weight for p in spec.points]
    lows = [p.ci_low for p in spec.points]
    highs = [p.ci_high for p in spec.points]

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=ages + ages[::-1],
        y=highs + lows[::-1],
        fill="toself",
        fillcolor=BAND_COLOR,
        line=dict(width=0),
        hoverinfo="skip",
        name="95% prediction interval",
    ))
    fig.add_trace(go.Scatter(
        x=ages,
        y=weights,
        mode="lines",
        line=dict(color=LINE_COLOR),
        customdata=[[low, high] for low, high in zip(lows, highs)],
        hovertemplate=hover_template(),
        meta=hover_meta(spec),
        name="Predicted weight",
    ))
    fig.add_trace(go.Scatter(
        x=[spec.marker.age_weeks],
        y=[spec.marker.weight],
        mode="markers",
        marker=dict(symbol="square-open", size=16, color=MARKER_COLOR, line=dict(width=1.5)),
        hoverinfo="skip",
        name="Current weight",
    ))
    fig.add_vline(x=spec.reference_x, line_dash="dash", line_width=1)
    fig.add_hline(y=spec.reference_y, line_dash="dash", line_width=1)
    fig.update_layout(
        template="plotly_white",
        xaxis=dict(title=spec.x_title, range=list(spec.x_range)),
        yaxis=dict(title=spec.y_title, range=list(spec.y_range)),
        hovermode="x",
        dragmode=False,
        showlegend=False,
    )
    return fig


def figure_json(spec: ChartSpec) -> dict:
    """Plotly figure as plain JSON-compatible data."""
    return json.loads(to_plotly_figure(spec).to_json())
