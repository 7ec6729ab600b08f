"""
Integration tests for health records, diet plans and the dashboard.
Tests the full request/response cycle with database.
"""


def add_vitals(client, user, record_date, heart_rate, weight="70"):
    response = client.post(
        f"/users/{user['user_id']}/health-records",
        json={"record_type": "vitals", "record_date": record_date, "data": {"heartRate": heart_rate, "weight": weight}},
        headers=user["headers"],
    )
    assert response.status_code == 201
    return response.json()


class TestHealthRecords:
    """Tests for /users/{user_id}/health-records."""

    def test_create_and_fetch(self, client, registered_user):
        created = add_vitals(client, registered_user, "2026-01-08", 72)

        response = client.get(
            f"/users/{registered_user['user_id']}/health-records/{created['id']}",
            headers=registered_user["headers"],
        )

        assert response.status_code == 200
        assert response.json()["record_type"] == "vitals"
        assert response.json()["record_date"] == "2026-01-08"

    def test_cross_user_access_is_forbidden(self, client, registered_user):
        response = client.get("/users/someone-else/health-records", headers=registered_user["headers"])
        assert response.status_code == 403

    def test_unauthenticated(self, client):
        response = client.get("/users/user123/health-records")
        assert response.status_code == 401

    def test_pagination(self, client, registered_user):
        for day in range(1, 6):
            add_vitals(client, registered_user, f"2026-01-{day:02d}", 70 + day)
        url = f"/users/{registered_user['user_id']}/health-records"

        first = client.get(url, params={"limit": 2}, headers=registered_user["headers"]).json()
        second = client.get(
            url, params={"limit": 2, "cursor": first["next_cursor"]}, headers=registered_user["headers"]
        ).json()

        assert [r["record_date"] for r in first["data"]] == ["2026-01-05", "2026-01-04"]
        assert [r["record_date"] for r in second["data"]] == ["2026-01-03", "2026-01-02"]
        assert second["has_more"] is True


class TestDashboard:
    """Tests for GET /users/{user_id}/dashboard."""

    def test_dashboard(self, client, registered_user):
        for day in range(1, 10):
            add_vitals(client, registered_user, f"2026-01-{day:02d}", 60 + day)
        add_vitals(client, registered_user, "2026-01-10", 72)

        response = client.get(
            f"/users/{registered_user['user_id']}/dashboard",
            params={"time_range": "week"},
            headers=registered_user["headers"],
        )

        assert response.status_code == 200
        data = response.json()
        assert data["stats"]["heart_rate"]["progress"] == 90
        assert data["stats"]["heart_rate"]["status"] == "text-blue-500"
        assert len(data["series"]) == 7
        assert data["series"][-1]["name"] == "1/10"
        assert data["counts"]["vitals"] == 10

    def test_diet_plan_saved_with_meal_sum(self, client, registered_user):
        user_id = registered_user["user_id"]
        response = client.post(
            f"/users/{user_id}/diet-plans",
            json={"name": "Plan", "goal": "maintenance", "meals": [
                {"name": "Breakfast", "calories": 450},
                {"name": "Lunch", "calories": 550},
            ]},
            headers=registered_user["headers"],
        )

        assert response.status_code == 201
        assert response.json()["totalCalories"] == 1000

        plans = client.get(f"/users/{user_id}/diet-plans", headers=registered_user["headers"]).json()
        assert plans[0]["calories_consistent"] is True

        dashboard = client.get(f"/users/{user_id}/dashboard", headers=registered_user["headers"]).json()
        assert dashboard["counts"]["diet_plans"] == 1
        assert dashboard["recent_activity"][0]["type"] == "nutrition"
