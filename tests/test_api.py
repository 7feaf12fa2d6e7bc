"""
test_api.py: HTTP tests for the database-free endpoints and error mapping.

The client is created without entering its context manager, so the startup
hook (logging setup and table creation) does not run.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


class TestCalculateEndpoints:

    def test_health(self, client):
        assert client.get("/").json()["status"] == "ok"

    def test_weight_calculation(self, client):
        response = client.post(
            "/dimension-weights/calculate",
            json={"thickness": "5", "width": "50", "length": "100", "density": "8.96"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert Decimal(data["weight_kg"]) == Decimal("0.224")
        assert "weight_calculation" in data["formula_details"]

    def test_costing_calculation(self, client):
        response = client.post("/costings/calculate", json={
            "rm_weight": "2.5", "rm_rate": "150.75", "process_cost": "50",
            "finishing_cost": "25", "packing_cost": "15",
            "overhead_percentage": "10", "margin_percentage": "15",
        })
        assert response.status_code == 200
        calculations = response.json()["data"]["calculations"]
        assert Decimal(calculations["margin_cost"]) == Decimal("70.03")
        assert Decimal(calculations["final_rate"]) == Decimal("583.60")

    def test_costing_defaults(self, client):
        response = client.post("/costings/calculate", json={"rm_weight": "0.224", "rm_rate": "150.75"})
        data = response.json()["data"]
        assert Decimal(data["inputs"]["overhead_percentage"]) == Decimal("10")
        assert Decimal(data["calculations"]["final_rate"]) == Decimal("42.22")
        assert data["formulas"]["rawMaterialCost"] == "0.224 Kg × ₹150.75 = ₹33.77"


class TestErrorMapping:

    def test_invalid_dimension_is_400(self, client):
        response = client.post(
            "/dimension-weights/calculate", json={"thickness": "0", "width": "50", "length": "100"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidDimension"

    def test_invalid_costing_input_is_400(self, client):
        response = client.post(
            "/costings/calculate", json={"rm_weight": "1", "rm_rate": "10", "margin_percentage": "150"}
        )
        assert response.status_code == 400
        assert response.json() == {
            "detail": "MarginPercentage must be between 0 and 100",
            "error": "InvalidCostingInput",
        }

    def test_schema_validation_is_422(self, client):
        response = client.post("/costings/calculate", json={"rm_rate": "10"})
        assert response.status_code == 422
