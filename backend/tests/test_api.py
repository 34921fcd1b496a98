"""
API tests for the migration preview service

Runs the FastAPI app in-process with TestClient.
"""
import pytest
from fastapi.testclient import TestClient

from app.main import app

Q96 = 2 ** 96

STRATEGY = {
    "token": "0x1000000000000000000000000000000000000001",
    "currency": "0x2000000000000000000000000000000000000002",
    "total_supply": 10 ** 24,
    "token_split_to_auction": 5_000_000,
    "fee": 3000,
    "tick_spacing": 60,
    "position_recipient": "0x00000000000000000000000000000000000000f1",
    "migration_allowed_at": 100,
    "sweep_allowed_at": 200,
    "operator": "0x00000000000000000000000000000000000000f2",
}


@pytest.fixture
def client():
    return TestClient(app)


def preview(client, strategy=None, clearing_price=Q96, currency_raised=4 * 10 ** 23):
    return client.post("/api/v1/plan/preview", json={
        "strategy": strategy or STRATEGY,
        "clearing_price": clearing_price,
        "currency_raised": currency_raised,
    })


class TestHealth:
    """Test health endpoint"""

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["health"] == "/api/v1/health"


class TestPlanPreview:
    """Test POST /api/v1/plan/preview"""

    def test_full_range_and_one_sided(self, client):
        """Leftover reserve tokens add a one-sided position before the final take"""
        response = preview(client)
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["migration"]["sqrt_price_x96"] == Q96
        assert body["migration"]["has_one_sided_params"] is True
        actions = [step["action"] for step in body["plan"]]
        assert actions == [
            "SETTLE", "SETTLE", "MINT_POSITION", "CLEAR_OR_TAKE", "CLEAR_OR_TAKE",
            "SETTLE", "MINT_POSITION", "CLEAR_OR_TAKE",
            "TAKE_PAIR",
        ]

    def test_exact_match(self, client):
        """Raised currency matches the reserve exactly: full range only"""
        response = preview(client, currency_raised=5 * 10 ** 23)
        assert response.status_code == 200
        body = response.json()
        assert body["migration"]["should_create_one_sided"] is False
        assert len(body["plan"]) == 6

    def test_invalid_price(self, client):
        response = preview(client, clearing_price=0)
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidPriceError"

    def test_invalid_fee(self, client):
        response = preview(client, strategy={**STRATEGY, "fee": 2_000_000})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidFeeError"

    def test_bad_address(self, client):
        response = preview(client, strategy={**STRATEGY, "token": "not-an-address"})
        assert response.status_code == 422


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
