"""
API tests for workspaces and requirements intake
"""


def _workspace(client):
    response = client.post("/api/v1/workspaces")
    assert response.status_code == 201
    return response.json()["id"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_unknown_workspace_is_404(client):
    assert client.get("/api/v1/workspaces/missing").status_code == 404
    assert client.get("/api/v1/workspaces/missing/intake").status_code == 404


def test_upload_and_manual_text_are_combined(client):
    wid = _workspace(client)
    response = client.post(
        f"/api/v1/workspaces/{wid}/intake/files",
        files=[
            ("files", ("a.txt", b"File A", "text/plain")),
            ("files", ("b.md", b"File B", "text/markdown")),
        ],
    )
    assert response.status_code == 200
    assert [f["status"] for f in response.json()["files"]] == ["Ready", "Ready"]

    state = client.put(f"/api/v1/workspaces/{wid}/intake/manual-text", json={"text": "Typed"}).json()
    assert state["combinedText"] == "File A\n\nFile B\n\nTyped"
    assert state["canAnalyze"] is True
    assert state["status"] == "Assembling"


def test_unsupported_upload_is_rejected(client):
    wid = _workspace(client)
    response = client.post(
        f"/api/v1/workspaces/{wid}/intake/files",
        files=[("files", ("image.png", b"\x89PNG", "image/png"))],
    )
    assert response.status_code == 400
    assert client.get(f"/api/v1/workspaces/{wid}/intake").json()["files"] == []


def test_remove_file(client):
    wid = _workspace(client)
    file_id = client.post(
        f"/api/v1/workspaces/{wid}/intake/files",
        files=[("files", ("a.txt", b"File A", "text/plain"))],
    ).json()["files"][0]["id"]

    state = client.delete(f"/api/v1/workspaces/{wid}/intake/files/{file_id}").json()
    assert state["files"] == []
    assert state["status"] == "Empty"
    assert client.delete(f"/api/v1/workspaces/{wid}/intake/files/{file_id}").status_code == 404


def test_dictation_flow(client):
    wid = _workspace(client)
    base = f"/api/v1/workspaces/{wid}/intake/dictation"
    assert client.post(f"{base}/start").json()["dictation"]["status"] == "Recording"
    client.put(f"{base}/transcript", json={"transcript": "Nurses can view charts"})
    assert client.post(f"{base}/stop").json()["dictation"]["status"] == "Reviewing"

    state = client.post(f"{base}/accept").json()
    assert state["dictation"] == {"status": "Idle", "transcript": ""}
    assert state["files"][0]["name"].startswith("speech-recognition-")
    assert state["combinedText"] == "Nurses can view charts"


def test_dictation_invalid_transition_is_400(client):
    wid = _workspace(client)
    assert client.post(f"/api/v1/workspaces/{wid}/intake/dictation/accept").status_code == 400
    assert client.post(f"/api/v1/workspaces/{wid}/intake/dictation/rewind").status_code == 404


def test_analyze_empty_document_is_400(client):
    wid = _workspace(client)
    assert client.post(f"/api/v1/workspaces/{wid}/intake/analyze").status_code == 400


def test_analyze_then_confirm_stores_handoff(
    client, fake_gemini, project_details_reply, validation_reply, compliance_reply
):
    fake_gemini.reply("parseProjectDetails", project_details_reply)
    fake_gemini.reply("validateRequirements", validation_reply)
    fake_gemini.reply("complianceCheck", compliance_reply)
    wid = _workspace(client)
    client.put(f"/api/v1/workspaces/{wid}/intake/manual-text", json={"text": "Patients log in"})

    analyzed = client.post(f"/api/v1/workspaces/{wid}/intake/analyze")
    assert analyzed.status_code == 200
    assert analyzed.json()["projectDetails"]["appName"] == "CarePortal"
    assert analyzed.json()["analysis"] is None

    edited = dict(project_details_reply, appName="CarePortal Pro")
    confirmed = client.post(
        f"/api/v1/workspaces/{wid}/intake/confirm", json={"projectDetails": edited}
    )
    assert confirmed.status_code == 200
    body = confirmed.json()
    assert body["validation"]["completenessValidation"]["isValid"] is False
    assert body["compliance"]["suggestions"]
    assert body["projectDetails"]["appName"] == "CarePortal Pro"

    stored = client.get(f"/api/v1/workspaces/{wid}/analysis").json()
    assert stored["requirements"] == "Patients log in"
    assert client.get(f"/api/v1/workspaces/{wid}/intake").json()["status"] == "Analysis Complete"

    titles = [n["title"] for n in client.get(f"/api/v1/workspaces/{wid}/notifications").json()["notifications"]]
    assert titles == ["Analysis Complete"]
    assert client.get(f"/api/v1/workspaces/{wid}/notifications").json()["notifications"] == []


def test_analysis_failure_maps_to_error_status(client, fake_gemini, validation_reply):
    fake_gemini.reply("validateRequirements", validation_reply)
    fake_gemini.reply("complianceCheck", "not json")
    wid = _workspace(client)
    client.put(f"/api/v1/workspaces/{wid}/intake/manual-text", json={"text": "Patients log in"})

    response = client.post(f"/api/v1/workspaces/{wid}/intake/confirm", json={})

    assert response.status_code == 502
    assert response.json()["detail"]["flow"] == "complianceCheck"
    assert client.get(f"/api/v1/workspaces/{wid}/analysis").status_code == 404
    notes = client.get(f"/api/v1/workspaces/{wid}/notifications").json()["notifications"]
    assert notes[-1]["title"] == "Analysis Failed"
    assert notes[-1]["variant"] == "destructive"


def test_models_listing(client):
    body = client.get("/api/v1/models").json()
    assert body["default"] == "gemini-2.5-flash"
    assert "gemini-2.5-pro" in [m["id"] for m in body["models"]]
    assert client.get("/api/v1/models/unknown").status_code == 404


def test_flow_endpoints(client, fake_gemini, compliance_reply):
    names = [f["name"] for f in client.get("/api/v1/flows").json()["flows"]]
    assert "complianceCheck" in names

    fake_gemini.reply("complianceCheck", compliance_reply)
    ok = client.post(
        "/api/v1/flows/complianceCheck/run",
        json={"requirements": "Store PHI", "complianceStandards": "HIPAA"},
    )
    assert ok.status_code == 200
    assert ok.json()["complianceReport"] == compliance_reply["complianceReport"]

    bad = client.post("/api/v1/flows/complianceCheck/run", json={"requirements": "Store PHI"})
    assert bad.status_code == 422
    assert client.post("/api/v1/flows/nope/run", json={}).status_code == 404
