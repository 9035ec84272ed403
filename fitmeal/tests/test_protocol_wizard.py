import unittest

from fitmeal.logic.protocols.generator import generate_protocol, parse_recommendations
from fitmeal.logic.protocols.safety import validate_safety
from fitmeal.logic.protocols.wizard import ProtocolWizard, WizardValidationError, get_wizard_steps


class TestWizardSteps(unittest.TestCase):

    def test_step_lists_by_role(self):
        admin = [s["title"] for s in get_wizard_steps("admin")]
        trainer = [s["title"] for s in get_wizard_steps("trainer")]
        self.assertEqual(len(admin), 7)
        self.assertEqual(len(trainer), 8)
        self.assertEqual(trainer[0], "Client Selection")
        self.assertEqual(trainer[1:], admin)

    def test_generation_and_safety_steps(self):
        self.assertEqual((ProtocolWizard("admin").generation_step, ProtocolWizard("admin").safety_step), (4, 5))
        self.assertEqual((ProtocolWizard("trainer").generation_step, ProtocolWizard("trainer").safety_step), (5, 6))

    def test_trainer_needs_a_client_first(self):
        wizard = ProtocolWizard("trainer")
        with self.assertRaises(WizardValidationError) as ctx:
            wizard.next()
        self.assertEqual(ctx.exception.errors, {"client": "Please select a client"})
        self.assertEqual(wizard.step, 1)

        wizard.update(client="c1")
        self.assertEqual(wizard.next(), 2)
        self.assertEqual(wizard.current_title, "Template Selection")

    def test_admin_walks_through_required_steps(self):
        wizard = ProtocolWizard("admin")
        wizard.update(template="t1")
        wizard.next()
        self.assertIn("health", wizard.validate_step())
        wizard.update(medications=["metformin"])
        wizard.next()
        self.assertIn("goals", wizard.validate_step())
        wizard.update(goals=["energy"])
        self.assertEqual(wizard.next(), wizard.generation_step)

    def test_navigation_is_bounded(self):
        wizard = ProtocolWizard("admin")
        self.assertEqual(wizard.back(), 1)
        self.assertEqual(wizard.go_to(99), 7)
        self.assertEqual(wizard.next(), 7)
        self.assertEqual(wizard.go_to(-3), 1)


class TestSafety(unittest.TestCase):

    def test_no_medical_details_is_safe(self):
        result = validate_safety()
        self.assertEqual(result["safetyRating"], "safe")
        self.assertFalse(result["requiresHealthcareApproval"])
        self.assertTrue(result["canProceedWithCaution"])

    def test_medium_condition_is_caution(self):
        result = validate_safety(conditions=["Type 2 Diabetes"])
        self.assertEqual(result["safetyRating"], "caution")
        self.assertEqual(result["interactions"][0]["severity"], "medium")

    def test_contraindications_require_approval(self):
        result = validate_safety(medications=["Warfarin"], protocol={"config": {"supplements": ["turmeric"]}})
        self.assertEqual(result["safetyRating"], "contraindicated")
        self.assertTrue(result["requiresHealthcareApproval"])
        turmeric = [i for i in result["interactions"] if i.get("substance") == "turmeric"]
        self.assertTrue(turmeric[0]["inProtocol"])

    def test_allergen_in_protocol_is_flagged(self):
        result = validate_safety(allergies=["peanut"], protocol={"name": "Peanut butter bulk"})
        self.assertEqual(result["interactions"][0]["type"], "allergy")
        self.assertEqual(result["safetyRating"], "contraindicated")


class TestGenerator(unittest.TestCase):

    def test_parse_recommendations_tolerates_fences_and_commas(self):
        raw = '```json\n["Drink water", "Sleep 8h",]\n```'
        self.assertEqual(parse_recommendations(raw), ["Drink water", "Sleep 8h"])
        self.assertEqual(parse_recommendations("no list here"), [])

    def test_rule_based_generation_without_template(self):
        protocol = generate_protocol(None, {"health_goals": ["Better sleep"], "intensity": "gentle",
                                            "duration": 14, "protocol_type": "sleep"})
        self.assertFalse(protocol["aiGenerated"])
        self.assertEqual(protocol["name"], "Custom Health Protocol")
        self.assertEqual(protocol["description"], "14-day gentle sleep protocol")
        self.assertIn("Avoid screens and caffeine in the evening", protocol["config"]["recommendations"])


def test_wizard_steps_endpoint(client, make_user, headers_for):
    body = client.get("/api/protocols/wizard/steps", headers=headers_for(make_user("trainer"))).json()
    assert len(body["steps"]) == 8
    assert (body["generationStep"], body["safetyStep"]) == (5, 6)


def test_safety_check_endpoint(client, make_user, headers_for):
    resp = client.post("/api/protocols/safety-check", headers=headers_for(make_user("trainer")),
                       json={"medications": ["lisinopril"], "conditions": [], "allergies": []})
    assert resp.status_code == 200
    assert resp.json()["safetyRating"] == "contraindicated"
    customer = make_user("customer")
    assert client.post("/api/protocols/safety-check", headers=headers_for(customer),
                       json={}).status_code == 403


def test_templates_endpoints(client, make_user, headers_for):
    admin = make_user("admin")
    headers = headers_for(admin)
    created = client.post("/api/protocol-templates", headers=headers, json={
        "name": "Hydration Focus", "templateType": "general", "category": "wellness", "defaultDuration": 14})
    assert created.status_code == 201
    wellness = client.get("/api/protocol-templates", headers=headers, params={"category": "wellness"}).json()
    assert [t["name"] for t in wellness] == ["Hydration Focus"]
    assert len(client.get("/api/protocol-templates", headers=headers).json()) == 5

    template_id = created.json()["id"]
    generated = client.post(f"/api/protocol-templates/{template_id}/generate", headers=headers,
                            json={"healthGoals": ["more energy"]}).json()
    assert generated["name"] == "Hydration Focus (Customized)"
    assert client.get("/api/protocol-templates/missing", headers=headers).status_code == 404
