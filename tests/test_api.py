from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from doggrowth.api.v1.routes.predict import get_growth_model
from doggrowth.core.config import settings
from doggrowth.main import app

client = TestClient(app)

PAYLOAD = {
    "breed": "Labrador Retriever",
    "sex": "Male",
    "age_input_mode": "slider",
    "current_age_weeks": 60,
    "current_weight_lbs": 85,
}


@pytest.fixture
def use_oracle():
    def _use(oracle):
        app.dependency_overrides[get_growth_model] = lambda: oracle
        return oracle

    yield _use
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_about():
    body = client.get("/api/v1/about").json()
    assert "Bertalanffy" in body["about"]
    assert body["disclaimer"]


def test_breeds(use_oracle, make_oracle):
    use_oracle(make_oracle(breeds=["Beagle", "Labrador Retriever"]))
    body = client.get("/api/v1/breeds").json()
    assert body["breeds"] == ["Beagle", "Labrador Retriever"]


def test_predict_growth(use_oracle, linear_oracle):
    use_oracle(linear_oracle)
    response = client.post("/api/v1/predict-growth", json=PAYLOAD)

    assert response.status_code == 200
    body = response.json()
    assert body["scaling_factor"] == pytest.approx(1.0625)
    assert body["typical_weight_at_current_age"] == pytest.approx(80.0)
    assert body["warnings"] == []
    assert len(body["adjusted_curve"]) == 101
    assert body["adjusted_curve"][60] == pytest.approx(
        {"age_weeks": 60, "predicted_weight": 85.0, "ci_low": 74.375, "ci_high": 95.625}
    )
    assert body["chart"]["marker"] == {"age_weeks": 60.0, "weight": 85.0}
    assert len(body["figure"]["data"]) == 3


def test_predict_growth_from_birthdate(use_oracle, linear_oracle):
    use_oracle(linear_oracle)
    payload = dict(PAYLOAD, age_input_mode="birthdate", current_age_weeks=None,
                   birthdate=(date.today() - timedelta(weeks=60)).isoformat())
    body = client.post("/api/v1/predict-growth", json=payload).json()
    assert body["query"]["current_age_weeks"] == pytest.approx(60.0)
    assert body["scaling_factor"] == pytest.approx(1.0625)


def test_warnings_are_reported(use_oracle, linear_oracle):
    use_oracle(linear_oracle)
    body = client.post("/api/v1/predict-growth", json=dict(PAYLOAD, current_weight_lbs=200)).json()
    assert body["warnings"] == [{
        "kind": "WeightDiscrepancy",
        "message": "Warning: Significant discrepancy detected between current and typical weight.",
    }]


def test_invalid_query(use_oracle, linear_oracle):
    use_oracle(linear_oracle)
    response = client.post("/api/v1/predict-growth", json=dict(PAYLOAD, sex="Select sex", current_weight_lbs=0))
    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "InvalidQuery"
    assert len(body["problems"]) == 2
    assert linear_oracle.calls == 0


def test_fixed_grid_rejects_older_dogs(use_oracle, linear_oracle, monkeypatch):
    use_oracle(linear_oracle)
    monkeypatch.setattr(settings, "age_grid_policy", "fixed")
    response = client.post("/api/v1/predict-growth", json=dict(PAYLOAD, current_age_weeks=150))
    assert response.status_code == 422
    assert response.json()["error"] == "InvalidQuery"


def test_degenerate_scaling(use_oracle, make_oracle):
    use_oracle(make_oracle(estimate=lambda age: 0.0))
    response = client.post("/api/v1/predict-growth", json=PAYLOAD)
    assert response.status_code == 422
    assert response.json()["error"] == "DegenerateScaling"


def test_oracle_failure(use_oracle, failing_oracle):
    use_oracle(failing_oracle)
    response = client.post("/api/v1/predict-growth", json=PAYLOAD)
    assert response.status_code == 503
    assert response.json()["error"] == "OracleFailure"


def test_model_status():
    body = client.get("/api/v1/predict-growth/status").json()
    assert body["model_path"] == settings.model_path
    assert {"model_loaded", "model_file_exists", "age_grid_policy"} <= set(body)


def test_missing_model_file(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "model_path", str(tmp_path / "missing.csv"))
    response = client.post("/api/v1/predict-growth", json=PAYLOAD)
    assert response.status_code == 503
    assert response.json()["error"] == "OracleFailure"

    reload = client.post("/api/v1/predict-growth/reload").json()
    assert reload["model_loaded"] is False
    assert "not found" in reload["error"]
