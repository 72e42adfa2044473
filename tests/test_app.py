"""
Tests for application assembly.
"""


class TestCreateApp:
    """Test blueprint registration and JSON error handlers."""

    def test_all_modules_registered(self, app):
        assert set(app.extensions["cms_modules"]) == {
            "auth", "analytics", "articles", "categories", "users", "curation", "platforms", "upload",
        }
        assert {"analytics", "articles", "categories", "users", "auth", "curation", "platforms", "upload"} <= set(
            app.blueprints
        )

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}

    def test_unknown_route_is_json(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert response.get_json() == {"message": "Route not found", "error": None}

    def test_wrong_method_is_json(self, client):
        response = client.patch("/api/analytics")
        assert response.status_code == 405
        assert response.get_json()["message"] == "Method not allowed"

    def test_routes_live_under_api_prefix(self, app):
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert "/api/analytics/chart/date-range" in rules
        assert "/api/articles/slug/<slug>" in rules
        assert "/api/platform-access/<access_id>" in rules
