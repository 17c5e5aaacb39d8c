"""Tests for the record, research, email and storage services."""

import io
import json
import re
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from pypdf import PdfWriter

from onboardly_mcp.models import CandidateInfo, EvaluationCreate, JobPostingCreate
from onboardly_mcp.services import email as email_module
from onboardly_mcp.services import resume_parser as resume_parser_module
from onboardly_mcp.services.applications import (
    ApplicationService,
    EvaluationService,
    JobPostingService,
)
from onboardly_mcp.services.email import EmailService, compose_evaluation_message
from onboardly_mcp.services.linkedin import LinkedinProfileService
from onboardly_mcp.services.resume_parser import (
    ResumeParserService,
    extract_json_text,
    extract_pdf_text,
    is_pdf,
    parse_llm_output,
)
from onboardly_mcp.services.storage import StorageService, content_type_for, file_extension

from .conftest import EVALUATION_ARGS, make_application, make_evaluation, make_posting

RESUME_URL = "https://files.example.com/store-resume/resumes/ada.pdf"

PARSED_RESUME = {
    "LinkedInUrl": "https://linkedin.com/in/ada",
    "GithubUrl": "https://github.com/ada",
    "MajorTechnologies": ["Python", "FastAPI"],
    "MajorProjects": {"Analytical Engine": "High"},
    "MajorCertifications": [],
    "ErrorMessage": None,
}


def gemini_reply(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


# ============ RECORD SERVICES ============


class TestJobPostingService:
    @pytest.mark.asyncio
    async def test_create(self, db_getter, fake_db):
        fake_db.jobposting.create.return_value = make_posting()

        posting = await JobPostingService(db_getter).create(
            JobPostingCreate(jobTitle="Backend Engineer", jobDescription="Build and run Python services.")
        )

        assert posting.job_posting_id == 10
        fake_db.jobposting.create.assert_awaited_once_with(
            data={"jobTitle": "Backend Engineer", "jobDescription": "Build and run Python services."}
        )

    @pytest.mark.asyncio
    async def test_list_ids(self, db_getter, fake_db):
        fake_db.jobposting.find_many.return_value = [
            make_posting(),
            make_posting(jobPostingId=11),
        ]

        assert await JobPostingService(db_getter).list_ids() == [10, 11]

    @pytest.mark.asyncio
    async def test_get_missing(self, db_getter):
        assert await JobPostingService(db_getter).get(3) is None


class TestApplicationService:
    @pytest.mark.asyncio
    async def test_save_application_connects_posting(self, db_getter, fake_db):
        fake_db.jobapplication.create.return_value = make_application()

        application = await ApplicationService(db_getter).save_application(
            name="Ada Lovelace",
            email="ada@example.com",
            position="Backend Engineer",
            resume_url=RESUME_URL,
            job_posting_id=10,
        )

        assert application.job_application_id == 1
        data = fake_db.jobapplication.create.await_args.kwargs["data"]
        assert data["jobPosting"] == {"connect": {"jobPostingId": 10}}
        assert data["isApplicationProcessed"] is False
        assert data["appliedOn"].tzinfo is not None

    @pytest.mark.asyncio
    async def test_details_need_a_posting(self, db_getter, fake_db):
        fake_db.jobapplication.find_unique.return_value = make_application(jobPosting=None)

        assert await ApplicationService(db_getter).get_application_details(1) is None

    @pytest.mark.asyncio
    async def test_candidate(self, db_getter, fake_db):
        fake_db.jobapplication.find_unique.return_value = make_application()

        candidate = await ApplicationService(db_getter).get_candidate(1)

        assert candidate == CandidateInfo(
            job_application_id=1,
            name="Ada Lovelace",
            email="ada@example.com",
            position="Backend Engineer",
        )

    @pytest.mark.asyncio
    async def test_mark_all_unprocessed(self, db_getter, fake_db):
        fake_db.jobapplication.update_many.return_value = 3

        assert await ApplicationService(db_getter).mark_all_unprocessed_as_processed() == 3
        fake_db.jobapplication.update_many.assert_awaited_once_with(
            where={"isApplicationProcessed": False},
            data={"isApplicationProcessed": True},
        )


class TestEvaluationService:
    @pytest.mark.asyncio
    async def test_non_positive_id_is_not_saved(self, db_getter, fake_db):
        evaluation = EvaluationCreate.model_validate({**EVALUATION_ARGS, "jobApplicationId": 0})

        assert await EvaluationService(db_getter).save(evaluation) is False
        fake_db.applicationevaluation.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_latest_evaluation_score(self, db_getter, fake_db):
        fake_db.applicationevaluation.find_first.return_value = make_evaluation(finalAverageScore=64.0)

        assert await EvaluationService(db_getter).get_final_score(1) == 64.0
        fake_db.applicationevaluation.find_first.assert_awaited_once_with(
            where={"jobApplicationId": 1},
            order={"applicationEvaluationId": "desc"},
        )

    @pytest.mark.asyncio
    async def test_score_missing(self, db_getter):
        assert await EvaluationService(db_getter).get_final_score(1) is None

    @pytest.mark.asyncio
    async def test_list_includes_application(self, db_getter, fake_db):
        fake_db.applicationevaluation.find_many.return_value = [
            make_evaluation(jobApplication=make_application())
        ]

        [evaluation] = await EvaluationService(db_getter).list_all()

        wire = evaluation.to_wire()
        assert wire["doesAIRecommend"] is True
        assert wire["jobApplication"]["name"] == "Ada Lovelace"


# ============ RESUME PARSING ============


class TestLlmOutput:
    def test_fenced_json(self):
        text = f"Here you go:\n```json\n{json.dumps(PARSED_RESUME)}\n```"

        result = parse_llm_output(text)

        assert result.linkedin_url == "https://linkedin.com/in/ada"
        assert result.major_projects == {"Analytical Engine": "High"}

    def test_bare_fence(self):
        assert extract_json_text("```\n{}\n```") == "{}"

    def test_nulls_become_empty(self):
        result = parse_llm_output('{"MajorTechnologies": null, "MajorProjects": null}')

        assert result.major_technologies == []
        assert result.major_projects == {}
        assert result.linkedin_url is None

    @pytest.mark.parametrize("text", ["not json", "[1, 2]", '{"MajorTechnologies": 5}'])
    def test_rejects_malformed_replies(self, text):
        with pytest.raises(ValueError):
            parse_llm_output(text)

    def test_is_pdf(self):
        assert is_pdf("https://x/cv", "application/pdf; charset=binary")
        assert is_pdf("https://x/CV.PDF", None)
        assert not is_pdf("https://x/cv.docx", "application/octet-stream")


def test_extract_pdf_text_from_blank_page():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)

    assert extract_pdf_text(buffer.getvalue()).strip() == ""


class TestResumeParserService:
    @pytest.fixture(autouse=True)
    def fake_pdf_text(self, monkeypatch):
        monkeypatch.setattr(
            resume_parser_module, "extract_pdf_text", lambda data: "Ada Lovelace\nPython"
        )

    def make_parser(self, settings, handler) -> ResumeParserService:
        return ResumeParserService(settings, transport=httpx.MockTransport(handler))

    @pytest.mark.asyncio
    async def test_parses_resume(self, test_settings):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.method == "GET":
                return httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})
            return httpx.Response(200, json=gemini_reply(f"```json\n{json.dumps(PARSED_RESUME)}\n```"))

        result = await self.make_parser(test_settings, handler).parse_resume(RESUME_URL)

        assert result.to_wire() == PARSED_RESUME
        generate = requests[1]
        assert generate.url.path == "/v1beta/models/gemini-1.5-flash:generateContent"
        assert generate.url.params["key"] == "test-key"
        payload = json.loads(generate.content)
        assert "Ada Lovelace\nPython" in payload["contents"][0]["parts"][0]["text"]
        assert payload["generationConfig"]["temperature"] == 0.1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_empty_url(self, test_settings, url):
        parser = self.make_parser(test_settings, lambda request: httpx.Response(500))

        result = await parser.parse_resume(url)

        assert result.error_message == "Resume URL cannot be empty."

    @pytest.mark.asyncio
    async def test_unsupported_file_type(self, test_settings):
        def handler(request):
            return httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})

        result = await self.make_parser(test_settings, handler).parse_resume("https://x/cv")

        assert result.error_message == (
            "Unsupported file type: text/html. Only PDF resumes are supported currently."
        )

    @pytest.mark.asyncio
    async def test_missing_api_key(self, test_settings):
        settings = test_settings.model_copy(update={"gemini_api_key": None})

        def handler(request):
            return httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})

        result = await self.make_parser(settings, handler).parse_resume(RESUME_URL)

        assert result.error_message == "Gemini API key not configured."

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply, error",
        [
            ({"candidates": []}, "Empty response from Gemini."),
            (gemini_reply("I cannot help with that."), "Failed to parse LLM response."),
        ],
    )
    async def test_unusable_reply(self, test_settings, reply, error):
        def handler(request):
            if request.method == "GET":
                return httpx.Response(200, content=b"%PDF-1.4", headers={"content-type": "application/pdf"})
            return httpx.Response(200, json=reply)

        result = await self.make_parser(test_settings, handler).parse_resume(RESUME_URL)

        assert result.error_message == error

    @pytest.mark.asyncio
    async def test_download_failure_is_reported(self, test_settings):
        result = await self.make_parser(
            test_settings, lambda request: httpx.Response(404)
        ).parse_resume(RESUME_URL)

        assert result.error_message.startswith("Error parsing resume:")
        assert result.major_technologies == []


# ============ PROFILE LOOKUP ============


class TestLinkedinProfileService:
    @pytest.mark.asyncio
    async def test_posts_profile_url(self, test_settings):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"headline": "Engineer"})

        service = LinkedinProfileService(test_settings, transport=httpx.MockTransport(handler))

        assert await service.get_profile("https://linkedin.com/in/ada") == {"headline": "Engineer"}
        assert seen == {
            "url": "https://hooks.example.com/profile",
            "body": {"url": "https://linkedin.com/in/ada", "name": ""},
        }

    @pytest.mark.asyncio
    async def test_not_configured(self, test_settings):
        service = LinkedinProfileService(
            test_settings.model_copy(update={"relevance_webhook_url": None})
        )

        with pytest.raises(ValueError, match="not configured"):
            await service.get_profile("https://linkedin.com/in/ada")

    @pytest.mark.asyncio
    async def test_webhook_error(self, test_settings):
        service = LinkedinProfileService(
            test_settings, transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )

        with pytest.raises(httpx.HTTPStatusError):
            await service.get_profile("https://linkedin.com/in/ada")


# ============ EMAIL ============


class TestEmailService:
    @pytest.fixture
    def fast_mail(self, monkeypatch) -> MagicMock:
        fast_mail_cls = MagicMock()
        fast_mail_cls.return_value.send_message = AsyncMock()
        monkeypatch.setattr(email_module, "FastMail", fast_mail_cls)
        return fast_mail_cls

    @pytest.mark.asyncio
    async def test_sends_plain_text(self, test_settings, fast_mail):
        sent = await EmailService(test_settings).send_email_by_address(
            "ada@example.com", "Hello", "Body text"
        )

        assert sent is True
        config = fast_mail.call_args.args[0]
        assert config.MAIL_FROM == "hr@example.com"
        assert config.MAIL_STARTTLS is True
        message = fast_mail.return_value.send_message.await_args.args[0]
        assert message.subject == "Hello"
        assert message.body == "Body text"
        assert len(message.recipients) == 1
        assert "ada@example.com" in str(message.recipients[0])

    @pytest.mark.asyncio
    async def test_smtp_failure_returns_false(self, test_settings, fast_mail):
        fast_mail.return_value.send_message.side_effect = ConnectionError("refused")

        assert await EmailService(test_settings).send_email_by_address("ada@example.com", "Hi", "x") is False

    @pytest.mark.asyncio
    async def test_invalid_recipient_returns_false(self, test_settings, fast_mail):
        assert await EmailService(test_settings).send_email_by_address("not-an-email", "Hi", "x") is False
        fast_mail.return_value.send_message.assert_not_awaited()

    def test_zero_threshold_uses_configured_value(self, test_settings):
        service = EmailService(test_settings)

        assert service.resolve_threshold(0) == 70.0
        assert service.resolve_threshold(None) == 70.0
        assert service.resolve_threshold(55) == 55

    @pytest.mark.asyncio
    async def test_score_equal_to_threshold_passes(self, email_service):
        candidate = CandidateInfo(
            job_application_id=3, name="Ada", email="ada@example.com", position="Engineer"
        )

        result = await email_service.send_evaluation_result_email(candidate, 70.0, "S", "B")

        assert result.is_success_email is True
        assert result.meeting_url == "https://meet.example.com/interview/3"

    @pytest.mark.parametrize("passed, phrase", [(True, "invite you"), (False, "not to move forward")])
    def test_composed_message(self, passed, phrase):
        candidate = CandidateInfo(
            job_application_id=3, name="Ada", email="ada@example.com", position="Engineer"
        )

        subject, body = compose_evaluation_message(candidate, passed)

        assert "Engineer" in subject
        assert body.startswith("Hi Ada,")
        assert phrase in body


# ============ STORAGE ============


class TestStorageService:
    @pytest.fixture
    def minio_client(self) -> MagicMock:
        client = MagicMock()
        client.bucket_exists.return_value = False
        return client

    @pytest.mark.parametrize(
        "filename, extension",
        [("cv.PDF", "pdf"), ("archive.tar.gz", "gz"), ("resume", "bin"), ("my.cv.docx", "docx")],
    )
    def test_file_extension(self, filename, extension):
        assert file_extension(filename) == extension

    def test_content_types(self):
        assert content_type_for("pdf") == "application/pdf"
        assert content_type_for("TXT") == "text/plain"
        assert content_type_for("bin") == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_upload_resume(self, test_settings, minio_client):
        storage = StorageService(test_settings, client=minio_client)

        url = await storage.upload_resume(b"%PDF-1.4", "Ada CV.pdf")

        assert re.fullmatch(
            r"https://files\.example\.com/store-resume/resumes/[0-9a-f-]{36}\.pdf", url
        )
        minio_client.make_bucket.assert_called_once_with("store-resume")
        bucket, object_name, stream = minio_client.put_object.call_args.args
        assert bucket == "store-resume"
        assert url.endswith(object_name)
        assert stream.read() == b"%PDF-1.4"
        assert minio_client.put_object.call_args.kwargs == {
            "length": 8,
            "content_type": "application/pdf",
        }

    @pytest.mark.asyncio
    async def test_bucket_checked_once(self, test_settings, minio_client):
        storage = StorageService(test_settings, client=minio_client)

        await storage.upload_resume(b"a", "one.txt")
        await storage.upload_resume(b"b", "two.txt")

        minio_client.bucket_exists.assert_called_once()
        assert minio_client.put_object.call_count == 2

    def test_public_url_defaults_to_endpoint(self, test_settings):
        settings = test_settings.model_copy(
            update={"minio_public_url": None, "minio_endpoint": "minio:9000", "minio_secure": True}
        )

        assert StorageService(settings).public_base_url == "https://minio:9000"
