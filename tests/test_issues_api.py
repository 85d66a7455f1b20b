import base64

import pytest

from shared.utils.enums import UserRole


@pytest.fixture
def asset(create_asset):
    return create_asset(asset_name="Signal generator", lab_location="Electronics Lab")


@pytest.fixture
def report_issue(lab_client, assistant_headers, asset, technician):
    def _report(**overrides):
        payload = {
            "asset_id": asset["id"],
            "issue_type": "breakdown",
            "description": "No output on channel 2",
            "required_skill": "electronics",
            "assigned_technician": str(technician.id),
            "severity": "high",
        }
        payload.update(overrides)
        response = lab_client.post("/api/issues/", json=payload, headers=assistant_headers)
        assert response.status_code == 201, response.text
        return response.json()["data"]
    return _report


def test_create_issue_populates_references(report_issue, assistant, technician, asset):
    issue = report_issue()

    assert issue["status"] == "pending"
    assert issue["lab_id"] == "Electronics Lab"
    assert issue["reported_by"]["id"] == str(assistant.id)
    assert issue["reported_by"]["name"] == "Asha Assistant"
    assert issue["assigned_technician"]["id"] == str(technician.id)
    assert issue["asset"]["asset_name"] == "Signal generator"
    assert issue["reported_at"] is not None


def test_create_issue_with_unskilled_technician_fails(lab_client, assistant_headers, asset, make_user):
    civil = make_user(role=UserRole.LAB_TECHNICIAN.value, skills=["civil"])

    response = lab_client.post("/api/issues/", json={
        "asset_id": asset["id"],
        "issue_type": "breakdown",
        "description": "Broken",
        "required_skill": "electronics",
        "assigned_technician": str(civil.id),
    }, headers=assistant_headers)

    assert response.status_code == 400
    assert "required skill" in response.json()["message"]


def test_create_issue_with_non_technician_fails(lab_client, assistant_headers, asset, assistant):
    response = lab_client.post("/api/issues/", json={
        "asset_id": asset["id"],
        "issue_type": "breakdown",
        "description": "Broken",
        "required_skill": "electronics",
        "assigned_technician": str(assistant.id),
    }, headers=assistant_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Selected user is not a technician"


def test_create_issue_for_unknown_asset_is_404(lab_client, assistant_headers, technician):
    response = lab_client.post("/api/issues/", json={
        "asset_id": "00000000-0000-0000-0000-000000000000",
        "issue_type": "breakdown",
        "description": "Broken",
        "required_skill": "electronics",
        "assigned_technician": str(technician.id),
    }, headers=assistant_headers)

    assert response.status_code == 404


def test_default_severity_is_medium(report_issue):
    assert report_issue(severity=None)["severity"] == "medium"


def test_full_lifecycle(lab_client, report_issue, technician_headers, assistant_headers):
    issue = report_issue()
    url = f"/api/issues/{issue['id']}/status"

    accepted = lab_client.patch(url, json={"status": "accepted"}, headers=technician_headers)
    assert accepted.status_code == 200
    accepted_at = accepted.json()["data"]["accepted_at"]
    assert accepted_at is not None

    started = lab_client.patch(url, json={
        "status": "in_progress",
        "checklist": [{"text": "Check fuse", "completed": True}, {"text": "Replace board"}],
    }, headers=technician_headers)
    assert started.status_code == 200
    data = started.json()["data"]
    assert data["started_at"] is not None
    assert data["checklist"] == [
        {"text": "Check fuse", "completed": True},
        {"text": "Replace board", "completed": False},
    ]

    # re-entering accepted keeps the first timestamp
    again = lab_client.patch(url, json={"status": "accepted"}, headers=technician_headers)
    assert again.json()["data"]["accepted_at"] == accepted_at

    resolved = lab_client.patch(url, json={
        "status": "resolved",
        "technician_remarks": "Board swapped",
    }, headers=technician_headers)
    assert resolved.json()["data"]["technician_remarks"] == "Board swapped"

    closed = lab_client.patch(f"/api/issues/{issue['id']}/close", headers=assistant_headers)
    assert closed.status_code == 200
    assert closed.json()["data"]["status"] == "closed"
    assert closed.json()["data"]["closed_at"] is not None


def test_only_reporter_can_close(lab_client, report_issue, technician_headers):
    issue = report_issue()
    url = f"/api/issues/{issue['id']}/status"
    lab_client.patch(url, json={"status": "resolved"}, headers=technician_headers)

    response = lab_client.patch(f"/api/issues/{issue['id']}/close", headers=technician_headers)
    assert response.status_code == 403

    response = lab_client.patch(url, json={"status": "closed"}, headers=technician_headers)
    assert response.status_code == 403


def test_close_before_resolution_fails(lab_client, report_issue, assistant_headers):
    issue = report_issue()

    response = lab_client.patch(f"/api/issues/{issue['id']}/close", headers=assistant_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Only resolved issues can be closed"


def test_status_update_validation(lab_client, report_issue, technician_headers):
    issue = report_issue()
    url = f"/api/issues/{issue['id']}/status"

    assert lab_client.patch(url, json={}, headers=technician_headers).status_code == 400
    assert lab_client.patch(url, json={"status": "done"}, headers=technician_headers).status_code == 400


def test_reject_stores_reason(lab_client, report_issue, technician_headers):
    issue = report_issue()

    response = lab_client.patch(f"/api/issues/{issue['id']}/status", json={
        "status": "rejected",
        "rejection_reason": "Not reproducible",
    }, headers=technician_headers)

    assert response.json()["data"]["status"] == "rejected"
    assert response.json()["data"]["rejection_reason"] == "Not reproducible"


def test_assistant_sees_own_issues_unless_viewing_all(
        lab_client, report_issue, make_user, headers_for, asset, technician):
    report_issue()
    other = make_user(role=UserRole.LAB_ASSISTANT.value)
    other_headers = headers_for(other)

    mine = lab_client.get("/api/issues/", headers=other_headers).json()
    assert mine["count"] == 0

    everything = lab_client.get("/api/issues/", params={"view_type": "all"},
                                headers=other_headers).json()
    assert everything["count"] == 1


def test_technician_sees_assigned_or_skill_matched(lab_client, report_issue, make_user, headers_for):
    report_issue()

    skilled = make_user(role=UserRole.LAB_TECHNICIAN.value, skills=["electronics"])
    unskilled = make_user(role=UserRole.LAB_TECHNICIAN.value, skills=[])

    assert lab_client.get("/api/issues/", headers=headers_for(skilled)).json()["count"] == 1
    assert lab_client.get("/api/issues/", headers=headers_for(unskilled)).json()["count"] == 0


def test_filters_and_lab_listing(lab_client, report_issue, admin_headers):
    report_issue(severity="low")
    report_issue(severity="high")

    high = lab_client.get("/api/issues/", params={"severity": "high"}, headers=admin_headers).json()
    assert high["count"] == 1

    by_lab = lab_client.get("/api/issues/lab/Electronics Lab", headers=admin_headers).json()
    assert by_lab["count"] == 2

    by_lab_low = lab_client.get("/api/issues/lab/Electronics Lab", params={"severity": "low"},
                                headers=admin_headers).json()
    assert by_lab_low["count"] == 1


def test_technician_stats(lab_client, report_issue, technician_headers):
    first = report_issue()
    report_issue()
    lab_client.patch(f"/api/issues/{first['id']}/status", json={"status": "in_progress"},
                     headers=technician_headers)

    stats = lab_client.get("/api/issues/stats/technician", headers=technician_headers).json()["data"]

    assert stats["pending"] == 1
    assert stats["in_progress"] == 1
    assert stats["resolved"] == 0
    assert stats["unassigned_pending"] == 0


def test_attachments(lab_client, report_issue, assistant_headers, assistant):
    issue = report_issue()
    content = b"%PDF-1.4 fake report"

    uploaded = lab_client.post(f"/api/issues/{issue['id']}/attachments", json={
        "filename": "report.pdf",
        "mimetype": "application/pdf",
        "data": "data:application/pdf;base64," + base64.b64encode(content).decode(),
    }, headers=assistant_headers)
    assert uploaded.status_code == 200

    attachments = uploaded.json()["data"]["attachments"]
    assert len(attachments) == 1
    attachment = attachments[0]
    assert attachment["size"] == len(content)
    assert attachment["uploaded_by"] == str(assistant.id)

    url = f"/api/issues/{issue['id']}/attachments/{attachment['id']}"
    downloaded = lab_client.get(url, headers=assistant_headers).json()["data"]
    assert base64.b64decode(downloaded["data"]) == content
    assert downloaded["original_name"] == "report.pdf"

    removed = lab_client.delete(url, headers=assistant_headers)
    assert removed.status_code == 200
    assert removed.json()["data"]["attachments"] == []

    assert lab_client.get(url, headers=assistant_headers).status_code == 404


def test_invalid_attachment_payload(lab_client, report_issue, assistant_headers):
    issue = report_issue()

    response = lab_client.post(f"/api/issues/{issue['id']}/attachments", json={
        "filename": "broken.bin",
        "data": "not base64!!",
    }, headers=assistant_headers)

    assert response.status_code == 400
