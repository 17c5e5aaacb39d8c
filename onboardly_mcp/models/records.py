"""Persistent record models.

These mirror the Prisma models in ``prisma/schema.prisma``. Field names are
snake_case in Python and camelCase on the wire and in the database.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for models loaded from Prisma rows."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class JobPosting(RecordModel):
    """An open position candidates can apply to."""

    job_posting_id: int
    job_title: str
    job_description: str


class JobApplication(RecordModel):
    """A candidate's application to a job posting."""

    job_application_id: int
    name: str
    email: str
    resume_url: str
    position: str
    applied_on: datetime
    job_posting_id: int
    is_application_processed: bool = False


class ApplicationEvaluation(RecordModel):
    """Scores and AI assessment attached to an application."""

    application_evaluation_id: int | None = None
    job_application_id: int
    resume_score: float
    linked_in_score: float
    projects_score: float
    ai_summary: str
    does_ai_recommend: bool = Field(..., alias="doesAIRecommend")
    ai_resume: str
    final_average_score: float
    job_application: JobApplication | None = None


class ApplicationDetails(RecordModel):
    """What an evaluating agent needs to review one application."""

    applicant_id: int
    job_id: int
    job_description: str
    resume_url: str


class CandidateInfo(RecordModel):
    """Who to contact about an application."""

    job_application_id: int
    name: str
    email: str
    position: str
