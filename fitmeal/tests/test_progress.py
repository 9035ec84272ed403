import unittest
from datetime import date

from fitmeal.domain.Goal import CustomerGoal
from fitmeal.events import web_observers
from fitmeal.logic.progress.goals import apply_progress, calculate_progress


class TestGoalProgress(unittest.TestCase):

    def test_decreasing_target(self):
        self.assertEqual(calculate_progress(200, 160, 180), 50)

    def test_increasing_target(self):
        self.assertEqual(calculate_progress(50, 100, 75), 50)
        self.assertEqual(calculate_progress(0, 3, 1), 33)
        self.assertEqual(calculate_progress(0, 8, 1), 13)  # 12.5 rounds up

    def test_clamped_to_range(self):
        self.assertEqual(calculate_progress(200, 160, 150), 100)
        self.assertEqual(calculate_progress(200, 160, 210), 0)

    def test_no_distance_or_missing_values(self):
        self.assertEqual(calculate_progress(100, 100, 90), 0)
        self.assertEqual(calculate_progress(None, 100, 90), 0)
        self.assertEqual(calculate_progress(80, 100, None), 0)

    def test_apply_progress_marks_achieved_once(self):
        goal = CustomerGoal(customer_id="c1", goal_type="weight_loss", goal_name="Lose 10kg",
                            target_value=70, target_unit="kg", starting_value=80, start_date="2024-01-01")
        self.assertFalse(apply_progress(goal, 75))
        self.assertEqual(goal.progress_percentage, 50)
        self.assertEqual(goal.status, "active")

        self.assertTrue(apply_progress(goal, 69, today=date(2024, 3, 1)))
        self.assertEqual(goal.status, "achieved")
        self.assertEqual(goal.achieved_date, "2024-03-01")
        self.assertFalse(apply_progress(goal, 68))


def test_measurements_are_listed_newest_first_and_filtered(client, make_user, headers_for):
    customer = make_user("customer")
    headers = headers_for(customer)
    for day, weight in (("2024-01-01", 80), ("2024-02-01", 78), ("2024-03-01", 76)):
        resp = client.post("/api/progress/measurements", headers=headers,
                           json={"measurementDate": day, "weightKg": weight})
        assert resp.status_code == 201

    data = client.get("/api/progress/measurements", headers=headers).json()["data"]
    assert [m["measurementDate"] for m in data] == ["2024-03-01", "2024-02-01", "2024-01-01"]

    ranged = client.get("/api/progress/measurements", headers=headers,
                        params={"startDate": "2024-01-15", "endDate": "2024-03-01"}).json()["data"]
    assert [m["weightKg"] for m in ranged] == [76, 78]


def test_invalid_measurement_is_rejected(client, make_user, headers_for):
    customer = make_user("customer")
    resp = client.post("/api/progress/measurements", headers=headers_for(customer),
                       json={"measurementDate": "2024-01-01", "bodyFatPercentage": 140})
    assert resp.status_code == 422


def test_goal_lifecycle(client, make_user, headers_for):
    customer = make_user("customer")
    headers = headers_for(customer)
    created = client.post("/api/progress/goals", headers=headers, json={
        "goalType": "weight_loss", "goalName": "  Reach 160  ", "targetValue": 160, "targetUnit": "lbs",
        "startingValue": 200, "currentValue": 180, "startDate": "2024-01-01"})
    assert created.status_code == 201
    goal = created.json()["data"]
    assert goal["goalName"] == "Reach 160"
    assert goal["progressPercentage"] == 50

    url = f"/api/progress/goals/{goal['id']}"
    assert client.patch(f"{url}/status", headers=headers, json={"status": "paused"}).json()["data"]["status"] == "paused"
    assert client.patch(f"{url}/status", headers=headers, json={"status": "achieved"}).status_code == 422

    done = client.patch(f"{url}/progress", headers=headers, json={"currentValue": 158}).json()["data"]
    assert done["status"] == "achieved"
    assert done["progressPercentage"] == 100
    assert done["achievedDate"]

    achieved = client.get("/api/progress/goals", headers=headers, params={"status": "achieved"}).json()["data"]
    assert len(achieved) == 1
    assert client.get("/api/progress/goals", headers=headers, params={"status": "nope"}).status_code == 400

    events = web_observers.get_events(role="admin")["events"]
    assert any(e["type"] == "goal.achieved" and e["customer_id"] == customer.id for e in events)


def test_goals_belong_to_their_customer(client, make_user, headers_for):
    owner = make_user("customer")
    other = make_user("customer")
    goal = client.post("/api/progress/goals", headers=headers_for(owner), json={
        "goalType": "strength", "goalName": "Bench 100", "targetValue": 100, "targetUnit": "kg",
        "startingValue": 60, "startDate": "2024-01-01"}).json()["data"]
    resp = client.patch(f"/api/progress/goals/{goal['id']}/progress", headers=headers_for(other),
                        json={"currentValue": 80})
    assert resp.status_code == 404


def test_trainer_reads_linked_customer_progress(client, linked_pair, headers_for):
    trainer, customer = linked_pair
    client.post("/api/progress/measurements", headers=headers_for(customer),
                json={"measurementDate": "2024-01-01", "weightKg": 80})
    data = client.get(f"/api/trainer/customers/{customer.id}/measurements",
                      headers=headers_for(trainer)).json()
    assert data["status"] == "success"
    assert data["data"][0]["weightKg"] == 80
