"""Record services for job postings, applications and evaluations.

All access goes through the shared Prisma client (see ``db.get_db``). The
client getter is injectable so handlers and routes can run against a fake
database in tests.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from ..db import get_db
from ..models import (
    ApplicationDetails,
    ApplicationEvaluation,
    CandidateInfo,
    EvaluationCreate,
    JobApplication,
    JobPosting,
    JobPostingCreate,
)

logger = logging.getLogger(__name__)

DbGetter = Callable[[], Awaitable[Any]]


class JobPostingService:
    """Job posting records."""

    def __init__(self, db_getter: DbGetter = get_db):
        self._get_db = db_getter

    async def create(self, posting: JobPostingCreate) -> JobPosting:
        db = await self._get_db()
        row = await db.jobposting.create(
            data={"jobTitle": posting.job_title, "jobDescription": posting.job_description}
        )
        logger.info(f"Created job posting {row.jobPostingId}: {posting.job_title}")
        return JobPosting.model_validate(row)

    async def get(self, job_posting_id: int) -> JobPosting | None:
        db = await self._get_db()
        row = await db.jobposting.find_unique(where={"jobPostingId": job_posting_id})
        return JobPosting.model_validate(row) if row else None

    async def list_all(self) -> list[JobPosting]:
        db = await self._get_db()
        rows = await db.jobposting.find_many(order={"jobPostingId": "asc"})
        return [JobPosting.model_validate(row) for row in rows]

    async def list_ids(self) -> list[int]:
        return [posting.job_posting_id for posting in await self.list_all()]


class ApplicationService:
    """Job application records and their processing state."""

    def __init__(self, db_getter: DbGetter = get_db):
        self._get_db = db_getter

    async def get_application(self, application_id: int) -> JobApplication | None:
        db = await self._get_db()
        row = await db.jobapplication.find_unique(where={"jobApplicationId": application_id})
        return JobApplication.model_validate(row) if row else None

    async def list_applications(self) -> list[JobApplication]:
        db = await self._get_db()
        rows = await db.jobapplication.find_many(order={"jobApplicationId": "asc"})
        return [JobApplication.model_validate(row) for row in rows]

    async def list_unprocessed(self) -> list[JobApplication]:
        db = await self._get_db()
        rows = await db.jobapplication.find_many(
            where={"isApplicationProcessed": False},
            order={"jobApplicationId": "asc"},
        )
        return [JobApplication.model_validate(row) for row in rows]

    async def mark_all_unprocessed_as_processed(self) -> int:
        db = await self._get_db()
        count = await db.jobapplication.update_many(
            where={"isApplicationProcessed": False},
            data={"isApplicationProcessed": True},
        )
        logger.info(f"Marked {count} applications as processed")
        return count

    async def mark_as_processed(self, application_ids: Sequence[int]) -> int:
        """Mark the given applications as processed.

        Returns:
            Number of rows that changed; already-processed rows are not counted
        """
        if not application_ids:
            return 0

        db = await self._get_db()
        count = await db.jobapplication.update_many(
            where={
                "jobApplicationId": {"in": list(application_ids)},
                "isApplicationProcessed": False,
            },
            data={"isApplicationProcessed": True},
        )
        logger.info(f"Marked {count} of {len(application_ids)} applications as processed")
        return count

    async def save_application(
        self,
        *,
        name: str,
        email: str,
        position: str,
        resume_url: str,
        job_posting_id: int,
        applied_on: datetime | None = None,
    ) -> JobApplication:
        db = await self._get_db()
        row = await db.jobapplication.create(
            data={
                "name": name,
                "email": email,
                "position": position,
                "resumeUrl": resume_url,
                "appliedOn": applied_on or datetime.now(UTC),
                "isApplicationProcessed": False,
                "jobPosting": {"connect": {"jobPostingId": job_posting_id}},
            }
        )
        logger.info(f"Saved application {row.jobApplicationId} for job posting {job_posting_id}")
        return JobApplication.model_validate(row)

    async def get_application_details(self, application_id: int) -> ApplicationDetails | None:
        """Join an application with its job posting.

        Returns None when either the application or its posting is missing.
        """
        db = await self._get_db()
        row = await db.jobapplication.find_unique(
            where={"jobApplicationId": application_id},
            include={"jobPosting": True},
        )
        if row is None or row.jobPosting is None:
            return None

        return ApplicationDetails(
            applicant_id=row.jobApplicationId,
            job_id=row.jobPosting.jobPostingId,
            job_description=row.jobPosting.jobDescription,
            resume_url=row.resumeUrl,
        )

    async def get_candidate(self, application_id: int) -> CandidateInfo | None:
        application = await self.get_application(application_id)
        if application is None:
            return None
        return CandidateInfo(
            job_application_id=application.job_application_id,
            name=application.name,
            email=application.email,
            position=application.position,
        )


class EvaluationService:
    """Application evaluation records."""

    def __init__(self, db_getter: DbGetter = get_db):
        self._get_db = db_getter

    async def save(self, evaluation: EvaluationCreate) -> bool:
        """Persist an evaluation.

        Returns:
            False without touching the database when the application id is
            not positive, else whether a row was written
        """
        if evaluation.job_application_id <= 0:
            logger.warning(f"Refusing evaluation for application id {evaluation.job_application_id}")
            return False

        db = await self._get_db()
        row = await db.applicationevaluation.create(
            data={
                "jobApplication": {"connect": {"jobApplicationId": evaluation.job_application_id}},
                "resumeScore": evaluation.resume_score,
                "linkedInScore": evaluation.linked_in_score,
                "projectsScore": evaluation.projects_score,
                "aiSummary": evaluation.ai_summary,
                "doesAIRecommend": evaluation.does_ai_recommend,
                "aiResume": evaluation.ai_resume,
                "finalAverageScore": evaluation.final_average_score,
            }
        )
        saved = bool(row and row.applicationEvaluationId)
        if saved:
            logger.info(
                f"Saved evaluation {row.applicationEvaluationId} for application "
                f"{evaluation.job_application_id}"
            )
        return saved

    async def list_all(self) -> list[ApplicationEvaluation]:
        db = await self._get_db()
        rows = await db.applicationevaluation.find_many(
            include={"jobApplication": True},
            order={"applicationEvaluationId": "asc"},
        )
        return [ApplicationEvaluation.model_validate(row) for row in rows]

    async def get_by_applicant(self, application_id: int) -> ApplicationEvaluation | None:
        """Latest evaluation for an application, if any."""
        db = await self._get_db()
        row = await db.applicationevaluation.find_first(
            where={"jobApplicationId": application_id},
            order={"applicationEvaluationId": "desc"},
        )
        return ApplicationEvaluation.model_validate(row) if row else None

    async def get_final_score(self, application_id: int) -> float | None:
        evaluation = await self.get_by_applicant(application_id)
        return evaluation.final_average_score if evaluation else None
