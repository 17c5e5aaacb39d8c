"""Pydantic models for the Onboardly MCP server.

Models are organized into submodules:
- enums: Enum definitions
- records: Persistent records (job postings, applications, evaluations)
- requests: Request bodies and tool parameters
- responses: Response and tool result models

All models are re-exported here for backward compatibility.
"""

# ============ ENUMS ============
from .enums import ResumeContentType, ToolName

# ============ RECORDS ============
from .records import (
    ApplicationDetails,
    ApplicationEvaluation,
    CandidateInfo,
    JobApplication,
    JobPosting,
)

# ============ REQUEST MODELS ============
from .requests import (
    EvaluationCreate,
    EvaluationEmailParams,
    JobPostingCreate,
    LinkedinProfileParams,
    MarkProcessedParams,
    ParseResumeParams,
    SendEmailParams,
    ToolCallParams,
)

# ============ RESPONSE MODELS ============
from .responses import (
    EvaluationEmailResult,
    FinalScoreResponse,
    HealthResponse,
    MessageResponse,
    ResumeParseResult,
)

__all__ = [
    # Enums
    "ResumeContentType",
    "ToolName",
    # Records
    "ApplicationDetails",
    "ApplicationEvaluation",
    "CandidateInfo",
    "JobApplication",
    "JobPosting",
    # Request models
    "EvaluationCreate",
    "EvaluationEmailParams",
    "JobPostingCreate",
    "LinkedinProfileParams",
    "MarkProcessedParams",
    "ParseResumeParams",
    "SendEmailParams",
    "ToolCallParams",
    # Response models
    "EvaluationEmailResult",
    "FinalScoreResponse",
    "HealthResponse",
    "MessageResponse",
    "ResumeParseResult",
]
