from fitmeal.api import deps


def test_link_and_list_customers(client, make_user, headers_for):
    trainer = make_user("trainer")
    customer = make_user("customer", email="carl@example.com")
    headers = headers_for(trainer)

    resp = client.post("/api/trainer/customers", json={"email": "Carl@example.com"}, headers=headers)
    assert resp.status_code == 201
    assert client.post("/api/trainer/customers", json={"email": "carl@example.com"},
                       headers=headers).status_code == 409
    assert client.post("/api/trainer/customers", json={"email": "nobody@example.com"},
                       headers=headers).status_code == 404
    assert client.post("/api/trainer/customers", json={"email": trainer.email},
                       headers=headers).status_code == 400

    listing = client.get("/api/trainer/customers", headers=headers).json()
    assert listing["total"] == 1
    assert listing["customers"][0]["id"] == customer.id
    assert listing["customers"][0]["mealPlanCount"] == 0


def test_unlinked_customer_is_not_found(client, make_user, headers_for):
    trainer = make_user("trainer")
    stranger = make_user("customer")
    resp = client.get(f"/api/trainer/customers/{stranger.id}/measurements", headers=headers_for(trainer))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Customer not found or access denied"


def test_meal_plan_assignment_replaces_same_plan(client, linked_pair, headers_for, sample_plan):
    trainer, customer = linked_pair
    headers = headers_for(trainer)
    url = f"/api/trainer/customers/{customer.id}/meal-plans"

    first = client.post(url, json={"mealPlanData": sample_plan}, headers=headers)
    assert first.status_code == 201
    assert first.json()["replaced"] is False

    renamed = {**sample_plan, "planName": "Lean Week v2"}
    second = client.post(url, json={"mealPlanData": renamed, "customerContext": {"goal": "cut"}}, headers=headers)
    assert second.json()["replaced"] is True
    assert second.json()["message"] == "Meal plan updated successfully"

    plans = client.get(url, headers=headers).json()
    assert plans["total"] == 1
    stored = plans["mealPlans"][0]["mealPlanData"]
    assert stored["planName"] == "Lean Week v2"
    assert stored["customerContext"] == {"goal": "cut"}

    assignment_id = plans["mealPlans"][0]["id"]
    assert client.delete(f"{url}/{assignment_id}", headers=headers).status_code == 200
    assert client.delete(f"{url}/{assignment_id}", headers=headers).status_code == 404


def test_meal_plan_with_meal_outside_plan_is_rejected(client, linked_pair, headers_for, sample_plan):
    trainer, customer = linked_pair
    bad = {**sample_plan, "days": 1}
    resp = client.post(f"/api/trainer/customers/{customer.id}/meal-plans",
                       json={"mealPlanData": bad}, headers=headers_for(trainer))
    assert resp.status_code == 422


def test_customer_sees_assigned_plan(client, linked_pair, headers_for, sample_plan):
    trainer, customer = linked_pair
    client.post(f"/api/trainer/customers/{customer.id}/meal-plans",
                json={"mealPlanData": sample_plan}, headers=headers_for(trainer))
    mine = client.get("/api/customer/meal-plans", headers=headers_for(customer)).json()
    assert mine["total"] == 1
    assert mine["mealPlans"][0]["trainerId"] == trainer.id


def test_protocol_crud_is_owner_only(client, make_user, headers_for):
    owner = make_user("trainer")
    other = make_user("trainer")
    created = client.post("/api/trainer/protocols", headers=headers_for(owner), json={
        "name": "<b>Gut</b> Reset", "description": "Four weeks", "type": "digestive",
        "duration": 28, "intensity": "Gentle", "tags": ["gut", ""]})
    assert created.status_code == 201
    protocol = created.json()
    assert protocol["name"] == "Gut Reset"
    assert protocol["intensity"] == "gentle"
    assert protocol["tags"] == ["gut"]

    url = f"/api/trainer/protocols/{protocol['id']}"
    assert client.put(url, json={"duration": 14}, headers=headers_for(other)).status_code == 404
    updated = client.put(url, json={"duration": 14}, headers=headers_for(owner))
    assert updated.json()["duration"] == 14
    assert updated.json()["name"] == "Gut Reset"
    renamed = client.put(url, json={"name": "<b>"}, headers=headers_for(owner))
    assert renamed.status_code == 422
    renamed = client.put(url, json={"name": "<i>Gut</i> Reset Plus"}, headers=headers_for(owner))
    assert renamed.json()["name"] == "Gut Reset Plus"

    assert client.delete(url, headers=headers_for(other)).status_code == 404
    assert client.delete(url, headers=headers_for(owner)).status_code == 204
    assert client.get("/api/trainer/protocols", headers=headers_for(owner)).json() == []


def test_protocol_assignment_requires_linked_clients(client, linked_pair, make_user, headers_for):
    trainer, customer = linked_pair
    stranger = make_user("customer")
    headers = headers_for(trainer)
    protocol = client.post("/api/trainer/protocols", headers=headers,
                           json={"name": "Sleep Reset", "duration": 10}).json()
    url = f"/api/trainer/protocols/{protocol['id']}/assign"

    rejected = client.post(url, json={"clientIds": [customer.id, stranger.id]}, headers=headers)
    assert rejected.status_code == 400
    assert rejected.json()["detail"]["invalidClientIds"] == [stranger.id]
    assert deps.protocols.list_assignments(protocol_id=protocol["id"]) == []

    resp = client.post(url, json={"clientIds": [customer.id], "startDate": "2024-05-01"}, headers=headers)
    assert resp.status_code == 200
    assignment = resp.json()["assignments"][0]
    assert assignment["startDate"] == "2024-05-01"
    assert assignment["endDate"] == "2024-05-11"
    assert assignment["status"] == "active"

    mine = client.get("/api/customer/protocols", headers=headers_for(customer)).json()
    assert mine["protocols"][0]["protocol"]["name"] == "Sleep Reset"


def test_create_protocol_for_customer_in_one_step(client, linked_pair, headers_for):
    trainer, customer = linked_pair
    resp = client.post(f"/api/trainer/customers/{customer.id}/protocols", headers=headers_for(trainer), json={
        "protocolData": {"name": "Energy Boost", "duration": 21, "intensity": "moderate"},
        "notes": "Check in weekly"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["assignment"]["protocolId"] == body["protocol"]["id"]
    assert body["assignment"]["notes"] == "Check in weekly"

    listing = client.get(f"/api/trainer/customers/{customer.id}/protocols", headers=headers_for(trainer)).json()
    assert listing["total"] == 1


def test_generate_protocol_from_template_without_ai(client, make_user, headers_for):
    trainer = make_user("trainer")
    headers = headers_for(trainer)
    templates = client.get("/api/protocol-templates", headers=headers).json()
    assert len(templates) == 4
    template = templates[0]

    resp = client.post("/api/trainer/protocols/generate", headers=headers, json={
        "templateId": template["id"], "healthGoals": ["Lose weight"], "conditions": ["diabetes"],
        "intensity": "high", "duration": 45})
    assert resp.status_code == 201
    body = resp.json()
    assert body["aiGenerated"] is False
    assert body["protocol"]["duration"] == 45
    assert body["protocol"]["config"]["templateId"] == template["id"]
    assert "Track body weight at the same time each morning" in body["protocol"]["config"]["recommendations"]
    assert "Condition-aware adjustments" in body["personalizedFeatures"]


def test_trainer_stats(client, linked_pair, headers_for, sample_plan):
    trainer, customer = linked_pair
    headers = headers_for(trainer)
    client.post(f"/api/trainer/customers/{customer.id}/meal-plans", json={"mealPlanData": sample_plan},
                headers=headers)
    stats = client.get("/api/trainer/profile/stats", headers=headers).json()
    assert stats["totalCustomers"] == 1
    assert stats["totalMealPlans"] == 1
