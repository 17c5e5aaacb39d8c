"""Tests for the REST routers, health endpoints and middleware."""

import pytest
from fastapi.testclient import TestClient

from onboardly_mcp import __version__
from onboardly_mcp.config import settings
from onboardly_mcp.server import create_app
from onboardly_mcp.services.linkedin import LinkedinProfileService

from .conftest import EVALUATION_ARGS, make_application, make_evaluation, make_posting


@pytest.fixture
def client(context, monkeypatch) -> TestClient:
    monkeypatch.setattr(settings, "api_prefix", "")
    return TestClient(create_app(context))


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__, "connections": 0}

    def test_ready_without_managed_database(self, client):
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_root(self, client):
        body = client.get("/").json()

        assert body["status"] == "running"
        assert body["activeConnections"] == 0
        assert body["sse"] == "/sse"

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert len(response.headers["x-request-id"]) == 36

    def test_request_id_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-Id": "trace-123"})

        assert response.headers["x-request-id"] == "trace-123"


class TestJobPostings:
    def test_create(self, client, fake_db):
        fake_db.jobposting.create.return_value = make_posting()

        response = client.post(
            "/job-postings",
            json={"jobTitle": "Backend Engineer", "jobDescription": "Build and run Python services."},
        )

        assert response.status_code == 201
        assert response.json() == {"message": "Job posting created successfully.", "jobPostingId": 10}

    def test_create_requires_fields(self, client):
        assert client.post("/job-postings", json={"jobTitle": "x"}).status_code == 422

    def test_list(self, client, fake_db):
        fake_db.jobposting.find_many.return_value = [make_posting()]

        assert client.get("/job-postings").json() == [
            {
                "jobPostingId": 10,
                "jobTitle": "Backend Engineer",
                "jobDescription": "Build and run Python services.",
            }
        ]

    def test_ids_route_is_not_an_id(self, client, fake_db):
        fake_db.jobposting.find_many.return_value = [make_posting(), make_posting(jobPostingId=12)]

        response = client.get("/job-postings/ids")

        assert response.status_code == 200
        assert response.json() == [10, 12]

    def test_missing_posting(self, client):
        response = client.get("/job-postings/99")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Job posting 99 not found"}


class TestApply:
    FORM = {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "position": "Backend Engineer",
        "jobPostingId": "10",
    }

    def test_apply_uploads_resume(self, client, fake_db, storage):
        fake_db.jobapplication.create.return_value = make_application(jobApplicationId=7)

        response = client.post(
            "/applications/apply",
            data=self.FORM,
            files={"resume": ("ada.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 201
        assert response.json() == {"message": "Application saved successfully.", "jobApplicationId": 7}
        storage.upload_resume.assert_awaited_once_with(b"%PDF-1.4", "ada.pdf")
        data = fake_db.jobapplication.create.await_args.kwargs["data"]
        assert data["resumeUrl"] == "https://files.example.com/store-resume/resumes/new.pdf"
        assert data["jobPosting"] == {"connect": {"jobPostingId": 10}}

    def test_resume_is_required(self, client, fake_db):
        response = client.post("/applications/apply", data=self.FORM)

        assert response.status_code == 400
        assert response.json()["error"] == "Resume file is required."
        fake_db.jobapplication.create.assert_not_awaited()

    def test_upload_failure(self, client, fake_db, storage):
        storage.upload_resume.side_effect = OSError("bucket unavailable")

        response = client.post(
            "/applications/apply",
            data=self.FORM,
            files={"resume": ("ada.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 502
        fake_db.jobapplication.create.assert_not_awaited()

    def test_invalid_email(self, client):
        response = client.post(
            "/applications/apply",
            data={**self.FORM, "email": "not-an-email"},
            files={"resume": ("ada.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 422

    def test_get_missing_application(self, client):
        assert client.get("/applications/5").status_code == 404


class TestEvaluations:
    def test_evaluate(self, client, fake_db):
        fake_db.applicationevaluation.create.return_value = make_evaluation()

        response = client.post("/evaluations/evaluate", json=EVALUATION_ARGS)

        assert response.status_code == 200
        assert response.json() == {"message": "Evaluation saved successfully."}

    def test_evaluate_rejects_invalid_id(self, client, fake_db):
        response = client.post("/evaluations/evaluate", json={**EVALUATION_ARGS, "jobApplicationId": 0})

        assert response.status_code == 400
        assert response.json()["error"] == "Valid evaluation and applicant ID are required."

    def test_final_score(self, client, fake_db):
        fake_db.applicationevaluation.find_first.return_value = make_evaluation()

        response = client.get("/evaluations/applicant/1/score")

        assert response.json() == {"jobApplicationId": 1, "finalAverageScore": 82.5}

    def test_final_score_missing(self, client):
        response = client.get("/evaluations/applicant/1/score")

        assert response.status_code == 404
        assert response.json()["error"] == "Evaluation not found for this applicant"

    def test_send_result_email(self, client, fake_db, email_service):
        fake_db.applicationevaluation.find_first.return_value = make_evaluation()
        fake_db.jobapplication.find_unique.return_value = make_application()

        response = client.post("/evaluations/mail/1/send-email")

        body = response.json()
        assert body["success"] is True
        assert body["isSuccessEmail"] is True
        assert body["meetingUrl"] == "https://meet.example.com/interview/1"
        email, subject, text = email_service.send_email_by_address.await_args.args
        assert email == "ada@example.com"
        assert subject == "Next steps for your Backend Engineer application"
        assert text.endswith("Meeting Link: https://meet.example.com/interview/1")

    def test_send_rejection_email(self, client, fake_db, email_service):
        fake_db.applicationevaluation.find_first.return_value = make_evaluation(finalAverageScore=40.0)
        fake_db.jobapplication.find_unique.return_value = make_application()

        body = client.post("/evaluations/mail/1/send-email").json()

        assert body["isSuccessEmail"] is False
        assert body["meetingUrl"] is None
        assert "Update on your" in email_service.send_email_by_address.await_args.args[1]

    def test_send_email_without_evaluation(self, client, email_service):
        response = client.post("/evaluations/mail/1/send-email")

        assert response.status_code == 404
        email_service.send_email_by_address.assert_not_awaited()


class TestToolRoutes:
    def test_list_tools_with_categories(self, client):
        body = client.get("/mcp/tools").json()

        assert body["count"] == 11
        categories = {tool["name"]: tool["category"] for tool in body["tools"]}
        assert categories["parse_resume"] == "research"
        assert categories["send_email"] == "email"
        assert categories["get_all_applications"] == "applications"

    def test_call_tool(self, client, fake_db):
        fake_db.jobapplication.find_unique.return_value = make_application(jobPosting=make_posting())

        response = client.post(
            "/mcp/tools/call",
            json={"tool": "get_application_details", "arguments": {"applicantId": 1}},
        )

        assert response.status_code == 200
        assert response.json()["result"]["jobId"] == 10

    def test_call_tool_invalid_arguments(self, client):
        response = client.post(
            "/mcp/tools/call", json={"tool": "get_application_details", "arguments": {}}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid parameter: applicantId must be an integer"

    def test_call_unknown_tool(self, client):
        response = client.post("/mcp/tools/call", json={"tool": "drop_database"})

        assert response.status_code == 422

    def test_linkedin_not_configured(self, client, context, test_settings):
        context.linkedin = LinkedinProfileService(
            test_settings.model_copy(update={"relevance_webhook_url": None})
        )

        response = client.post("/mcp/linkedin/profile", json={"profileUrl": "https://linkedin.com/in/ada"})

        assert response.status_code == 503
        assert response.json()["error"] == "Relevance webhook URL not configured"

    def test_parse_resume(self, client, resume_parser):
        response = client.post("/mcp/resume/parse", json={"resumeUrl": "https://x/cv.pdf"})

        assert response.json()["LinkedInUrl"] == "https://linkedin.com/in/ada"
        resume_parser.parse_resume.assert_awaited_once_with("https://x/cv.pdf")

    def test_send_email(self, client, email_service):
        response = client.post(
            "/mcp/email/send", json={"email": "ada@example.com", "subject": "Hi", "body": "Hello"}
        )

        assert response.json() is True

    def test_mark_processed(self, client, fake_db):
        fake_db.jobapplication.update_many.return_value = 2

        response = client.post("/mcp/applications/mark-processed", json={"ids": [1, 2]})

        assert response.json() == 2

    def test_unprocessed_applications(self, client, fake_db):
        fake_db.jobapplication.find_many.return_value = [make_application()]

        [application] = client.get("/mcp/applications/unprocessed").json()

        assert application["email"] == "ada@example.com"

    def test_details_missing(self, client):
        assert client.get("/mcp/applications/5/details").status_code == 404
