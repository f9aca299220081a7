"""
API tests for deriving and managing scenarios
"""

LOGIN_REQUIREMENT = "The system must allow users to log in with email and password"


def _workspace(client):
    return client.post("/api/v1/workspaces").json()["id"]


def _derive(client, wid, requirements=LOGIN_REQUIREMENT):
    return client.post(
        f"/api/v1/workspaces/{wid}/scenarios/derive", json={"requirements": requirements}
    )


def _generated(client, fake_gemini, scenarios_reply, testcases_reply):
    fake_gemini.reply("parseScenarios", scenarios_reply)
    fake_gemini.reply("generateTestCases", testcases_reply)
    wid = _workspace(client)
    _derive(client, wid)
    response = client.post(f"/api/v1/workspaces/{wid}/scenarios/REQ-001/generate-tests")
    assert response.status_code == 202
    return wid


def test_derive_login_requirement(client, fake_gemini, scenarios_reply):
    fake_gemini.reply("parseScenarios", scenarios_reply)
    wid = _workspace(client)

    response = _derive(client, wid)

    assert response.status_code == 200
    body = response.json()
    assert body["fallback"] is False
    assert len(body["scenarios"]) == 1
    scenario = body["scenarios"][0]
    assert scenario["id"] == "REQ-001"
    assert scenario["priority"] == "Medium"
    assert scenario["testCases"] == []
    assert scenario["areTestsGenerating"] is False
    assert LOGIN_REQUIREMENT in fake_gemini.calls_for("parseScenarios")[0]


def test_derive_failure_yields_fallback_scenario(client, fake_gemini):
    fake_gemini.reply("parseScenarios", "I could not find any scenarios.")
    wid = _workspace(client)

    body = _derive(client, wid).json()

    assert body["fallback"] is True
    assert len(body["scenarios"]) == 1
    assert body["scenarios"][0]["description"] == LOGIN_REQUIREMENT
    notes = client.get(f"/api/v1/workspaces/{wid}/notifications").json()["notifications"]
    assert notes[-1]["title"] == "Scenario Generation Failed"


def test_derive_uses_and_clears_the_handoff(
    client, fake_gemini, validation_reply, compliance_reply, scenarios_reply
):
    fake_gemini.reply("validateRequirements", validation_reply)
    fake_gemini.reply("complianceCheck", compliance_reply)
    fake_gemini.reply("parseScenarios", scenarios_reply)
    wid = _workspace(client)
    client.put(f"/api/v1/workspaces/{wid}/intake/manual-text", json={"text": LOGIN_REQUIREMENT})
    assert client.post(f"/api/v1/workspaces/{wid}/intake/confirm", json={}).status_code == 200

    response = client.post(f"/api/v1/workspaces/{wid}/scenarios/derive")

    assert response.status_code == 200
    assert LOGIN_REQUIREMENT in fake_gemini.calls_for("parseScenarios")[0]

    from db.session import get_db_context
    from services.requirements.handoff_service import load_handoff

    with get_db_context() as db:
        assert load_handoff(db, wid) is None


def test_derive_without_document_is_422(client):
    wid = _workspace(client)
    assert client.post(f"/api/v1/workspaces/{wid}/scenarios/derive").status_code == 422


def test_create_read_and_delete(client):
    wid = _workspace(client)
    created = client.post(
        f"/api/v1/workspaces/{wid}/scenarios",
        json={"title": "Export records", "description": "Patients can export their records"},
    )
    assert created.status_code == 201
    scenario = created.json()
    assert scenario["id"].startswith("SCN-")
    assert scenario["reqId"] == scenario["id"]
    assert scenario["requirementSource"] == "Manual"

    detail = client.get(f"/api/v1/workspaces/{wid}/scenarios/{scenario['id']}").json()
    assert detail["pendingEdit"] is None

    assert client.delete(f"/api/v1/workspaces/{wid}/scenarios/{scenario['id']}").status_code == 200
    assert client.get(f"/api/v1/workspaces/{wid}/scenarios").json()["scenarios"] == []
    assert client.get(f"/api/v1/workspaces/{wid}/scenarios/{scenario['id']}").status_code == 404


def test_create_rejects_missing_fields(client):
    wid = _workspace(client)
    response = client.post(f"/api/v1/workspaces/{wid}/scenarios", json={"title": "No description"})
    assert response.status_code == 422


def test_generate_tests_in_background(client, fake_gemini, scenarios_reply, testcases_reply):
    wid = _generated(client, fake_gemini, scenarios_reply, testcases_reply)

    scenario = client.get(f"/api/v1/workspaces/{wid}/scenarios/REQ-001").json()

    assert [c["testCaseId"] for c in scenario["testCases"]] == ["TC-001", "TC-002"]
    assert scenario["areTestsGenerating"] is False
    prompt = fake_gemini.calls_for("generateTestCases")[0]
    assert LOGIN_REQUIREMENT in prompt
    assert "FDA, GDPR" in prompt
    titles = [n["title"] for n in client.get(f"/api/v1/workspaces/{wid}/notifications").json()["notifications"]]
    assert titles[-1] == "Test Cases Generated"


def test_generation_failure_keeps_scenario(client, fake_gemini, scenarios_reply):
    fake_gemini.reply("parseScenarios", scenarios_reply)
    fake_gemini.reply("generateTestCases", {"cases": "nothing useful"})
    wid = _workspace(client)
    _derive(client, wid)

    assert client.post(f"/api/v1/workspaces/{wid}/scenarios/REQ-001/generate-tests").status_code == 202

    scenario = client.get(f"/api/v1/workspaces/{wid}/scenarios/REQ-001").json()
    assert scenario["testCases"] == []
    assert scenario["areTestsGenerating"] is False
    notes = client.get(f"/api/v1/workspaces/{wid}/notifications").json()["notifications"]
    assert notes[-1]["title"] == "Test Case Generation Failed"
    assert notes[-1]["variant"] == "destructive"


def test_edit_without_tests_applies_immediately(client, fake_gemini, scenarios_reply):
    fake_gemini.reply("parseScenarios", scenarios_reply)
    wid = _workspace(client)
    _derive(client, wid)

    response = client.put(
        f"/api/v1/workspaces/{wid}/scenarios/REQ-001",
        json={"title": "Secure login", "description": LOGIN_REQUIREMENT, "priority": "high"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "applied"
    assert body["scenario"]["title"] == "Secure login"
    assert body["scenario"]["priority"] == "High"
    assert fake_gemini.calls_for("analyzeImpactOnChange") == []


def test_edit_with_tests_waits_for_confirmation(client, fake_gemini, scenarios_reply, testcases_reply):
    wid = _generated(client, fake_gemini, scenarios_reply, testcases_reply)
    fake_gemini.reply("analyzeImpactOnChange", {"impactAnalysis": "TC-001 must cover MFA."})
    form = {"title": "Login with MFA", "description": LOGIN_REQUIREMENT + " and a one-time code"}

    outcome = client.put(f"/api/v1/workspaces/{wid}/scenarios/REQ-001", json=form).json()

    assert outcome["status"] == "pending_confirmation"
    assert outcome["impactAnalysis"] == "TC-001 must cover MFA."
    assert outcome["scenario"]["title"] == "User login"
    assert "ID: TC-001, Title: Valid login" in fake_gemini.calls_for("analyzeImpactOnChange")[0]

    detail = client.get(f"/api/v1/workspaces/{wid}/scenarios/REQ-001").json()
    assert detail["pendingEdit"]["impactAnalysis"] == "TC-001 must cover MFA."
    assert client.put(f"/api/v1/workspaces/{wid}/scenarios/REQ-001", json=form).status_code == 409

    confirmed = client.post(f"/api/v1/workspaces/{wid}/scenarios/REQ-001/edit/confirm").json()
    assert confirmed["title"] == "Login with MFA"
    assert confirmed["testCases"] == []
    assert client.post(f"/api/v1/workspaces/{wid}/scenarios/REQ-001/edit/confirm").status_code == 409


def test_cancel_edit_keeps_scenario(client, fake_gemini, scenarios_reply, testcases_reply):
    wid = _generated(client, fake_gemini, scenarios_reply, testcases_reply)
    fake_gemini.reply("analyzeImpactOnChange", {"impactAnalysis": "Minor."})
    client.put(
        f"/api/v1/workspaces/{wid}/scenarios/REQ-001",
        json={"title": "Renamed", "description": LOGIN_REQUIREMENT},
    )

    kept = client.post(f"/api/v1/workspaces/{wid}/scenarios/REQ-001/edit/cancel").json()

    assert kept["title"] == "User login"
    assert len(kept["testCases"]) == 2


def test_impact_failure_fails_open(client, fake_gemini, scenarios_reply, testcases_reply):
    wid = _generated(client, fake_gemini, scenarios_reply, testcases_reply)
    fake_gemini.reply("analyzeImpactOnChange", "garbled")

    outcome = client.put(
        f"/api/v1/workspaces/{wid}/scenarios/REQ-001",
        json={"title": "Renamed", "description": LOGIN_REQUIREMENT},
    ).json()

    assert outcome["status"] == "applied_without_analysis"
    assert outcome["scenario"]["title"] == "Renamed"
    assert len(outcome["scenario"]["testCases"]) == 2


def test_unknown_scenario_is_404(client):
    wid = _workspace(client)
    assert client.post(f"/api/v1/workspaces/{wid}/scenarios/nope/generate-tests").status_code == 404
    assert client.delete(f"/api/v1/workspaces/{wid}/scenarios/nope").status_code == 404


def test_dashboard_summary(client, fake_gemini, scenarios_reply, testcases_reply):
    _generated(client, fake_gemini, scenarios_reply, testcases_reply)

    summary = client.get("/api/v1/dashboard/summary").json()

    assert summary["workspaces"] == 1
    assert summary["scenarios"] == 1
    assert summary["test_cases"] == 2
