"""
API tests: role gating, error shape and the main request flows
"""
import pytest
from starlette.websockets import WebSocketDisconnect

from conftest import PNG_BYTES, auth_headers
from student_hub.models.achievement import AchievementStatus

API = "/api/v1"


class TestRoleGating:

    def test_anonymous_gets_401_with_login_redirect(self, client):
        response = client.get(f"{API}/achievements")

        assert response.status_code == 401
        assert response.json() == {
            "detail": "Not authenticated",
            "code": "auth_failure",
            "redirect": "/login",
        }

    def test_invalid_token(self, client):
        response = client.get(f"{API}/achievements", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401

    def test_student_cannot_open_faculty_routes(self, client, student):
        response = client.get(f"{API}/approvals", headers=auth_headers(student.uid))

        assert response.status_code == 403
        assert response.json()["redirect"] == "/login"

    def test_faculty_cannot_submit(self, client, faculty):
        response = client.post(
            f"{API}/achievements",
            data={"title": "x", "description": "y", "date": "2025-01-01"},
            headers=auth_headers(faculty.uid)
        )

        assert response.status_code == 403

    def test_identity_without_profile_is_forbidden(self, client):
        response = client.get(f"{API}/achievements", headers=auth_headers("ghost"))

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"

    def test_session_route_decision(self, client, student):
        response = client.get(
            f"{API}/session/route",
            params={"path": "/faculty-dashboard/analytics"},
            headers=auth_headers(student.uid)
        )

        assert response.json()["action"] == "redirect"
        assert response.json()["reason"] == "role_mismatch"

    def test_session_landing(self, client, faculty):
        response = client.get(f"{API}/session", headers=auth_headers(faculty.uid))

        body = response.json()
        assert body["state"] == "authenticated"
        assert body["role"] == "faculty"
        assert body["landing"]["target"] == "/faculty-dashboard"


class TestAchievementFlow:

    def test_submit_approve_and_publish(self, client, users, ai_client, student, faculty):
        ai_client.responses.append('["Robotics", "Embedded C"]')

        submitted = client.post(
            f"{API}/achievements",
            data={"title": "Robotics Cup", "description": "Won the regional round", "date": "2025-02-10"},
            files={"image": ("cert.png", PNG_BYTES, "image/png")},
            headers=auth_headers(student.uid)
        )
        assert submitted.status_code == 201
        record_id = submitted.json()["id"]
        assert submitted.json()["status"] == "pending"

        queue = client.get(f"{API}/approvals", headers=auth_headers(faculty.uid))
        assert [r["id"] for r in queue.json()] == [record_id]

        approved = client.post(f"{API}/approvals/{record_id}/approve", headers=auth_headers(faculty.uid))
        assert approved.status_code == 200
        assert len(approved.json()["blockchainHash"]) == 64

        # Skill extraction ran as a background task after the response
        assert users.get(student.uid).skill_set == ["Robotics", "Embedded C"]

        again = client.post(f"{API}/approvals/{record_id}/approve", headers=auth_headers(faculty.uid))
        assert again.status_code == 409
        assert again.json()["code"] == "failed_precondition"

        portfolio = client.get(f"{API}/portfolio/{student.uid}")
        assert portfolio.status_code == 200
        assert portfolio.json()["studentName"] == "Asha Verma"
        assert [a["title"] for a in portfolio.json()["achievements"]] == ["Robotics Cup"]
        assert "verifiedBy" not in portfolio.json()["achievements"][0]

    def test_reject_requires_reason(self, client, student, faculty, make_record):
        record = make_record(student)

        response = client.post(
            f"{API}/approvals/{record.id}/reject",
            json={"reason": "   "},
            headers=auth_headers(faculty.uid)
        )

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_submit_without_image(self, client, student):
        response = client.post(
            f"{API}/achievements",
            data={"title": "Robotics Cup", "description": "desc", "date": "2025-02-10"},
            headers=auth_headers(student.uid)
        )

        assert response.status_code == 422

    def test_class_view_groups_by_student(self, client, student, other_student, faculty, make_record):
        make_record(student, "A")
        make_record(other_student, "B", status=AchievementStatus.VERIFIED)

        response = client.get(f"{API}/class-view", headers=auth_headers(faculty.uid))

        assert [g["studentName"] for g in response.json()] == ["Asha Verma", "Bilal Khan"]

    def test_other_class_is_empty(self, client, student, faculty, make_record):
        make_record(student)

        response = client.get(f"{API}/approvals", params={"section": "C"}, headers=auth_headers(faculty.uid))

        assert response.json() == []


class TestPublicAndAI:

    def test_unknown_portfolio_is_404(self, client):
        response = client.get(f"{API}/portfolio/nobody")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_portfolio_csv_export(self, client, student, make_record):
        make_record(student, "Robotics Cup", status=AchievementStatus.VERIFIED)

        response = client.get(f"{API}/portfolio/{student.uid}/export", params={"format": "csv"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "Robotics Cup" in response.text

    def test_analytics(self, client, student, faculty, make_record):
        make_record(student)

        response = client.get(f"{API}/analytics", headers=auth_headers(faculty.uid))

        body = response.json()
        assert body["total_achievements"] == 1
        assert body["performance"] == [{"name": "CSE", "achievements": 1}]

    def test_ai_failure_is_502(self, client, users, ai_client, student):
        users.update(student.uid, {"skillSet": ["Python"]})
        ai_client.responses.append("no json today")

        response = client.get(f"{API}/recommendations", headers=auth_headers(student.uid))

        assert response.status_code == 502
        assert response.json()["code"] == "malformed_ai_response"

    def test_report_for_student_of_another_class(self, client, ai_client, student, faculty, make_record):
        make_record(student, status=AchievementStatus.VERIFIED)
        body = {"studentId": student.uid, "reportType": "Progress Report"}

        response = client.post(f"{API}/reports", json=body, params={"section": "B"}, headers=auth_headers(faculty.uid))

        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"
        assert ai_client.calls == []

        ai_client.responses.append("Asha has made steady progress.")
        response = client.post(f"{API}/reports", json=body, headers=auth_headers(faculty.uid))
        assert response.json()["content"] == "Asha has made steady progress."

    def test_form_options(self, client):
        response = client.get(f"{API}/profile/options")

        assert "CSE" in response.json()["departments"]


class TestAccounts:

    def test_register_login_logout(self, client, identity):
        registered = client.post(f"{API}/auth/register", json={
            "email": "new@example.com", "password": "secret1", "name": "New Student",
            "role": "student", "department": "IT", "year": "1st Year", "section": "A"
        })
        assert registered.status_code == 201
        token = registered.json()["idToken"]

        login = client.post(f"{API}/auth/login", json={"email": "new@example.com", "password": "secret1"})
        assert login.json()["role"] == "student"

        logout = client.post(f"{API}/auth/logout", headers={"Authorization": f"Bearer {token}"})
        assert logout.status_code == 204
        assert identity.revoked == [registered.json()["uid"]]

    def test_register_with_unknown_department(self, client):
        response = client.post(f"{API}/auth/register", json={
            "email": "new@example.com", "password": "secret1", "name": "New",
            "department": "Astrology", "year": "1st Year", "section": "A"
        })

        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"


class TestLiveStreams:

    def test_pending_queue_stream(self, client, student, faculty, make_record):
        record = make_record(student)
        token = f"token-{faculty.uid}"

        with client.websocket_connect(f"{API}/live/approvals?token={token}") as websocket:
            message = websocket.receive_json()

        assert message["type"] == "snapshot"
        assert message["stream"] == "approvals"
        assert [r["id"] for r in message["data"]] == [record.id]

    def test_stream_rejects_wrong_role(self, client, student):
        with pytest.raises(WebSocketDisconnect):
            with client.websocket_connect(f"{API}/live/approvals?token=token-{student.uid}") as websocket:
                websocket.receive_json()

    def test_disconnect_cancels_subscription(self, client, store, student):
        with client.websocket_connect(f"{API}/live/achievements?token=token-{student.uid}") as websocket:
            websocket.receive_json()
            assert store.listener_count == 1

        client.get("/health")
        assert store.listener_count == 0

    def test_portfolio_stream_for_unknown_student(self, client, faculty):
        for student_id in ("nobody", faculty.uid):
            with pytest.raises(WebSocketDisconnect) as closed:
                with client.websocket_connect(f"{API}/live/portfolio/{student_id}") as websocket:
                    websocket.receive_json()
            assert closed.value.code == 1008

    def test_portfolio_stream(self, client, student, make_record):
        make_record(student, "Robotics Cup", status=AchievementStatus.VERIFIED)

        with client.websocket_connect(f"{API}/live/portfolio/{student.uid}") as websocket:
            message = websocket.receive_json()

        assert [a["title"] for a in message["data"]] == ["Robotics Cup"]
