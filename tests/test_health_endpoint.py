"""Test health endpoints"""


class TestHealthEndpoint:
    """Test health endpoint is accessible"""

    def test_health_endpoint(self, client):
        """Test that the health endpoint is accessible"""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "booking-user-fields"

    def test_detailed_health_endpoint(self, client):
        """Test that the detailed health check reaches the database"""
        response = client.get("/health/detailed")

        assert response.status_code == 200
        assert response.json()["checks"]["database"] == "healthy"
