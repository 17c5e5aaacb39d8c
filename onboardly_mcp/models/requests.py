"""Request models (Pydantic *Params classes) for the REST API and tools."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from .enums import ToolName


class CamelModel(BaseModel):
    """Accepts camelCase (wire) or snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============ CORE REQUEST MODELS ============


class ToolCallParams(BaseModel):
    """Direct tool execution request for the REST tool endpoint."""

    tool: ToolName = Field(..., description="The tool to execute")
    arguments: dict = Field(default_factory=dict, description="Tool arguments")


# ============ RECORD PARAMS ============


class JobPostingCreate(CamelModel):
    """Body of POST /job-postings."""

    job_title: str = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1)


class EvaluationCreate(CamelModel):
    """Scores and AI assessment for one application."""

    job_application_id: int
    resume_score: float
    linked_in_score: float
    projects_score: float
    ai_summary: str
    does_ai_recommend: bool = Field(..., alias="doesAIRecommend")
    ai_resume: str
    final_average_score: float


class MarkProcessedParams(BaseModel):
    """Body of POST /mcp/applications/mark-processed."""

    ids: list[int] = Field(default_factory=list)


# ============ CANDIDATE RESEARCH PARAMS ============


class ParseResumeParams(CamelModel):
    resume_url: str = ""


class LinkedinProfileParams(CamelModel):
    profile_url: str = Field(..., min_length=1)


# ============ EMAIL PARAMS ============


class SendEmailParams(BaseModel):
    """Plain-text email to a single recipient."""

    email: EmailStr
    subject: str
    body: str


class EvaluationEmailParams(CamelModel):
    """Arguments of send_evaluation_result_email."""

    job_application_id: int
    final_average_score: float
    email_subject: str
    email_body: str
    meeting_url_base: str | None = None
    threshold_score: float | None = None
    is_success: bool | None = None
