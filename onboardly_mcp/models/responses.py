"""Response models for the Onboardly MCP server."""

from pydantic import BaseModel, ConfigDict, Field

# ============ SERVICE RESPONSES ============


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    connections: int = Field(default=0, ge=0, description="Live SSE connections")


class MessageResponse(BaseModel):
    """Plain acknowledgement returned by write endpoints."""

    message: str


class FinalScoreResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_application_id: int = Field(..., alias="jobApplicationId")
    final_average_score: float = Field(..., alias="finalAverageScore")


# ============ TOOL RESULTS ============


class ResumeParseResult(BaseModel):
    """Structured data extracted from a resume.

    Keys are PascalCase on the wire. ``error_message`` is set instead of
    raising when the resume could not be parsed.
    """

    model_config = ConfigDict(populate_by_name=True)

    linkedin_url: str | None = Field(default=None, alias="LinkedInUrl")
    github_url: str | None = Field(default=None, alias="GithubUrl")
    major_technologies: list[str] = Field(default_factory=list, alias="MajorTechnologies")
    major_projects: dict[str, str] = Field(default_factory=dict, alias="MajorProjects")
    major_certifications: list[str] = Field(default_factory=list, alias="MajorCertifications")
    error_message: str | None = Field(default=None, alias="ErrorMessage")

    @classmethod
    def failure(cls, message: str) -> "ResumeParseResult":
        return cls(error_message=message)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class EvaluationEmailResult(BaseModel):
    """Outcome of sending an evaluation result email."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    email_sent: bool = Field(..., alias="emailSent")
    is_success_email: bool = Field(..., alias="isSuccessEmail")
    score: float
    threshold: float
    candidate_name: str = Field(..., alias="candidateName")
    candidate_email: str = Field(..., alias="candidateEmail")
    job_title: str = Field(..., alias="jobTitle")
    meeting_url: str | None = Field(default=None, alias="meetingUrl")
    error: str | None = None

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
