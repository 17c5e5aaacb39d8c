"""MCP Tool Definitions for Onboardly.

This module contains all tool definitions returned by the tools/list method.
Each tool definition includes the schema for its input parameters. Schemas
are advisory: arguments are passed to handlers as received.

Tool Categories:
    - Applications: get_unprocessed_applications, get_application_details,
      get_all_applications, mark_*_as_processed, save_application_evaluation
    - Research: parse_resume, get_linkedin_profile
    - Email: send_email, send_evaluation_result_email
"""

from enum import Enum

from ..models import ToolName


class ToolCategory(str, Enum):
    """Tool category for discovery and grouping."""

    APPLICATIONS = "applications"
    RESEARCH = "research"
    EMAIL = "email"


TOOL_CATEGORIES: dict[str, ToolCategory] = {
    ToolName.GET_UNPROCESSED_APPLICATIONS: ToolCategory.APPLICATIONS,
    ToolName.GET_APPLICATION_DETAILS: ToolCategory.APPLICATIONS,
    ToolName.GET_ALL_APPLICATIONS: ToolCategory.APPLICATIONS,
    ToolName.MARK_APPLICATION_AS_PROCESSED: ToolCategory.APPLICATIONS,
    ToolName.MARK_APPLICATIONS_AS_PROCESSED: ToolCategory.APPLICATIONS,
    ToolName.MARK_ALL_APPLICATIONS_AS_PROCESSED: ToolCategory.APPLICATIONS,
    ToolName.SAVE_APPLICATION_EVALUATION: ToolCategory.APPLICATIONS,
    ToolName.PARSE_RESUME: ToolCategory.RESEARCH,
    ToolName.GET_LINKEDIN_PROFILE: ToolCategory.RESEARCH,
    ToolName.SEND_EMAIL: ToolCategory.EMAIL,
    ToolName.SEND_EVALUATION_RESULT_EMAIL: ToolCategory.EMAIL,
}


def get_tool_category(tool_name: str) -> ToolCategory | None:
    return TOOL_CATEGORIES.get(tool_name)


_NO_ARGUMENTS = {"type": "object", "properties": {}}

TOOL_DEFINITIONS: list[dict] = [
    # ============ Application Tools ============
    {
        "name": ToolName.GET_UNPROCESSED_APPLICATIONS.value,
        "description": "Get all unprocessed job applications",
        "inputSchema": _NO_ARGUMENTS,
    },
    {
        "name": ToolName.GET_APPLICATION_DETAILS.value,
        "description": "Get application details by applicant ID",
        "inputSchema": {
            "type": "object",
            "properties": {
                "applicantId": {"type": "number", "description": "The applicant ID"},
            },
            "required": ["applicantId"],
        },
    },
    {
        "name": ToolName.GET_ALL_APPLICATIONS.value,
        "description": "Get all job applications",
        "inputSchema": _NO_ARGUMENTS,
    },
    {
        "name": ToolName.MARK_APPLICATION_AS_PROCESSED.value,
        "description": "Mark a single application as processed",
        "inputSchema": {
            "type": "object",
            "properties": {
                "applicationId": {
                    "type": "number",
                    "description": "Application ID to mark as processed",
                },
            },
            "required": ["applicationId"],
        },
    },
    {
        "name": ToolName.MARK_APPLICATIONS_AS_PROCESSED.value,
        "description": "Mark multiple applications as processed",
        "inputSchema": {
            "type": "object",
            "properties": {
                "applicationIds": {
                    "type": "array",
                    "items": {"type": "number"},
                    "description": "List of application IDs to mark as processed",
                },
            },
            "required": ["applicationIds"],
        },
    },
    {
        "name": ToolName.MARK_ALL_APPLICATIONS_AS_PROCESSED.value,
        "description": "Mark every unprocessed application as processed. Returns how many changed.",
        "inputSchema": _NO_ARGUMENTS,
    },
    {
        "name": ToolName.SAVE_APPLICATION_EVALUATION.value,
        "description": "Save an application evaluation to the database",
        "inputSchema": {
            "type": "object",
            "properties": {
                "jobApplicationId": {"type": "number"},
                "resumeScore": {"type": "number"},
                "linkedInScore": {"type": "number"},
                "projectsScore": {"type": "number"},
                "aiSummary": {"type": "string"},
                "doesAIRecommend": {"type": "boolean"},
                "aiResume": {"type": "string"},
                "finalAverageScore": {"type": "number"},
            },
            "required": [
                "jobApplicationId",
                "resumeScore",
                "linkedInScore",
                "projectsScore",
                "aiSummary",
                "doesAIRecommend",
                "aiResume",
                "finalAverageScore",
            ],
        },
    },
    # ============ Research Tools ============
    {
        "name": ToolName.PARSE_RESUME.value,
        "description": "Parse a resume from URL and extract structured data",
        "inputSchema": {
            "type": "object",
            "properties": {
                "resumeUrl": {"type": "string", "description": "URL of the resume PDF to parse"},
            },
            "required": ["resumeUrl"],
        },
    },
    {
        "name": ToolName.GET_LINKEDIN_PROFILE.value,
        "description": "Get LinkedIn profile data from profile URL",
        "inputSchema": {
            "type": "object",
            "properties": {
                "profileUrl": {"type": "string", "description": "LinkedIn profile URL"},
            },
            "required": ["profileUrl"],
        },
    },
    # ============ Email Tools ============
    {
        "name": ToolName.SEND_EMAIL.value,
        "description": "Send email to a specified address",
        "inputSchema": {
            "type": "object",
            "properties": {
                "email": {"type": "string", "description": "Recipient email address"},
                "subject": {"type": "string", "description": "Email subject"},
                "body": {"type": "string", "description": "Email body content"},
            },
            "required": ["email", "subject", "body"],
        },
    },
    {
        "name": ToolName.SEND_EVALUATION_RESULT_EMAIL.value,
        "description": (
            "Send evaluation result email (success or failure) to candidate based on their "
            "final average score. Automatically fetches candidate details from application. "
            "If score >= threshold, send success email with meeting URL. Otherwise, send "
            "rejection email. The agent should generate a personalized, professional email body."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "jobApplicationId": {
                    "type": "number",
                    "description": "The job application ID (candidate name, email and job title are fetched from it)",
                },
                "finalAverageScore": {
                    "type": "number",
                    "description": "The final average score from evaluation (0-100)",
                },
                "emailSubject": {
                    "type": "string",
                    "description": "Email subject line appropriate for the outcome",
                },
                "emailBody": {
                    "type": "string",
                    "description": "Personalized email body. For success emails the meeting URL is appended automatically",
                },
                "meetingUrlBase": {
                    "type": "string",
                    "description": "Base URL for meeting links (optional, defaults to MEETING_URL_BASE)",
                },
                "thresholdScore": {
                    "type": "number",
                    "description": "Passing threshold (optional, defaults to EVALUATION_THRESHOLD_SCORE, 70)",
                },
                "isSuccess": {
                    "type": "boolean",
                    "description": "Explicit outcome. When provided it overrides the threshold logic.",
                },
            },
            "required": [
                "jobApplicationId",
                "finalAverageScore",
                "emailSubject",
                "emailBody",
            ],
        },
    },
]
