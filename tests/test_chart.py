import pandas as pd
import pytest

from doggrowth.growth.chart import build_chart_spec, figure_json, to_plotly_figure
from doggrowth.growth.query import Query, Sex


@pytest.fixture
def curve():
    ages = list(range(0, 101))
    weights = [20.0 + 0.754 * a for a in ages]  # peaks at 95.4
    return pd.DataFrame({
        "age_weeks": ages,
        "predicted_weight": weights,
        "ci_low": [w - 5 for w in weights],
        "ci_high": [w + 5 for w in weights],
    })


def test_chart_spec_contract(curve, lab_query):
    spec = build_chart_spec(curve, lab_query, typical_weight=80.0)

    assert len(spec.points) == len(curve)
    assert spec.marker.age_weeks == 60
    assert spec.marker.weight == 85
    assert (spec.reference_x, spec.reference_y) == (60, 85)
    assert spec.x_range == (0.0, 100.0)
    assert spec.y_range == (0.0, 120.0)
    assert spec.x_title == "Age (weeks)"


def test_tooltips_carry_query_metadata(curve):
    query = Query("Labrador Retriever", Sex.MALE, 60.37, 85.125)
    spec = build_chart_spec(curve, query, typical_weight=80.004)
    tip = spec.tooltips[60]
    assert tip.age_weeks == 60
    assert tip.ci_low == pytest.approx(tip.predicted_weight - 5)
    assert tip.breed == "Labrador Retriever"
    assert tip.sex == "Male"
    assert tip.current_age_weeks == 60.37
    assert tip.current_weight_lbs == 85.125
    assert tip.typical_weight_lbs == 80.004


def test_plotly_figure(curve, lab_query):
    spec = build_chart_spec(curve, lab_query, typical_weight=80.0)
    fig = to_plotly_figure(spec)

    band, line, marker = fig.data
    assert band.fill == "toself"
    assert len(band.x) == 2 * len(curve)
    assert len(line.customdata) == len(curve)
    assert len(line.customdata[0]) == 2
    assert "Typical weight at current age" in line.hovertemplate
    assert marker.marker.symbol == "square-open"
    assert len(fig.layout.shapes) == 2
    assert all(shape.line.dash == "dash" for shape in fig.layout.shapes)
    assert fig.layout.hovermode == "x"
    assert list(fig.layout.yaxis.range) == [0.0, 120.0]


def test_figure_json_is_plain_data(curve, lab_query):
    data = figure_json(build_chart_spec(curve, lab_query, typical_weight=80.0))
    assert set(data) >= {"data", "layout"}
    assert isinstance(data["data"][1]["customdata"], list)


def test_hover_shows_query_details_through_meta(curve):
    query = Query("Labrador Retriever", Sex.FEMALE, 60.37, 85.125)
    fig = to_plotly_figure(build_chart_spec(curve, query, typical_weight=80.004))
    line = fig.data[1]
    assert list(line.meta) == ["Labrador Retriever", "Female", 60.37, 85.125, 80.004]
    assert "%{meta[2]:.1f} weeks" in line.hovertemplate
    assert "Labrador Retriever" not in line.hovertemplate


def test_free_text_breed_is_not_interpreted(curve):
    query = Query("Mutt %{y} <b>big</b>", Sex.MALE, 60, 85)
    fig = to_plotly_figure(build_chart_spec(curve, query, typical_weight=80.0))
    line = fig.data[1]
    assert "Mutt" not in line.hovertemplate
    assert line.meta[0] == "Mutt %{y} &lt;b&gt;big&lt;/b&gt;"
