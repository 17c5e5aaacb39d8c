"""Shared fixtures: a fake Prisma client and a HandlerContext built on it."""

from datetime import UTC, datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from onboardly_mcp.config import Settings
from onboardly_mcp.engine.handlers.base import HandlerContext
from onboardly_mcp.models import ResumeParseResult
from onboardly_mcp.services.applications import (
    ApplicationService,
    EvaluationService,
    JobPostingService,
)
from onboardly_mcp.services.email import EmailService
from onboardly_mcp.services.linkedin import LinkedinProfileService


def make_posting(**overrides) -> SimpleNamespace:
    row = {
        "jobPostingId": 10,
        "jobTitle": "Backend Engineer",
        "jobDescription": "Build and run Python services.",
    }
    row.update(overrides)
    return SimpleNamespace(**row)


def make_application(**overrides) -> SimpleNamespace:
    row = {
        "jobApplicationId": 1,
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "resumeUrl": "https://files.example.com/store-resume/resumes/ada.pdf",
        "position": "Backend Engineer",
        "appliedOn": datetime(2025, 1, 2, 9, 30, tzinfo=UTC),
        "jobPostingId": 10,
        "isApplicationProcessed": False,
        "jobPosting": None,
    }
    row.update(overrides)
    return SimpleNamespace(**row)


def make_evaluation(**overrides) -> SimpleNamespace:
    row = {
        "applicationEvaluationId": 5,
        "jobApplicationId": 1,
        "resumeScore": 80.0,
        "linkedInScore": 75.0,
        "projectsScore": 92.5,
        "aiSummary": "Strong backend background.",
        "doesAIRecommend": True,
        "aiResume": "Ada has shipped several Python services.",
        "finalAverageScore": 82.5,
        "jobApplication": None,
    }
    row.update(overrides)
    return SimpleNamespace(**row)


EVALUATION_ARGS = {
    "jobApplicationId": 1,
    "resumeScore": 80,
    "linkedInScore": 75,
    "projectsScore": 92.5,
    "aiSummary": "Strong backend background.",
    "doesAIRecommend": True,
    "aiResume": "Ada has shipped several Python services.",
    "finalAverageScore": 82.5,
}


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        smtp_user="hr@example.com",
        smtp_password="secret",
        smtp_from="hr@example.com",
        gemini_api_key="test-key",
        relevance_webhook_url="https://hooks.example.com/profile",
        meeting_url_base="https://meet.example.com/interview/",
        evaluation_threshold_score=70.0,
        minio_public_url="https://files.example.com",
    )


@pytest.fixture
def fake_db() -> MagicMock:
    """Prisma-shaped client whose model actions are AsyncMocks."""
    db = MagicMock()
    for model in ("jobposting", "jobapplication", "applicationevaluation"):
        actions = getattr(db, model)
        actions.find_many = AsyncMock(return_value=[])
        actions.find_unique = AsyncMock(return_value=None)
        actions.find_first = AsyncMock(return_value=None)
        actions.create = AsyncMock()
        actions.update_many = AsyncMock(return_value=0)
    return db


@pytest.fixture
def db_getter(fake_db):
    async def get_fake_db():
        return fake_db

    return get_fake_db


@pytest.fixture
def email_service(test_settings) -> EmailService:
    service = EmailService(test_settings)
    service.send_email_by_address = AsyncMock(return_value=True)
    return service


@pytest.fixture
def resume_parser() -> MagicMock:
    parser = MagicMock()
    parser.parse_resume = AsyncMock(
        return_value=ResumeParseResult(
            linkedin_url="https://linkedin.com/in/ada",
            major_technologies=["Python"],
        )
    )
    return parser


@pytest.fixture
def storage() -> MagicMock:
    service = MagicMock()
    service.upload_resume = AsyncMock(
        return_value="https://files.example.com/store-resume/resumes/new.pdf"
    )
    return service


@pytest.fixture
def context(db_getter, test_settings, email_service, resume_parser, storage) -> HandlerContext:
    return HandlerContext(
        applications=ApplicationService(db_getter),
        job_postings=JobPostingService(db_getter),
        evaluations=EvaluationService(db_getter),
        resume_parser=resume_parser,
        linkedin=LinkedinProfileService(test_settings),
        email=email_service,
        storage=storage,
    )
