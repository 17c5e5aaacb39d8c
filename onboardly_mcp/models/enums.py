"""Enum definitions for the Onboardly MCP server."""

from enum import StrEnum


class ToolName(StrEnum):
    """Names of the tools exposed through tools/list and tools/call."""

    # Applications
    GET_UNPROCESSED_APPLICATIONS = "get_unprocessed_applications"
    GET_APPLICATION_DETAILS = "get_application_details"
    GET_ALL_APPLICATIONS = "get_all_applications"
    MARK_APPLICATION_AS_PROCESSED = "mark_application_as_processed"
    MARK_APPLICATIONS_AS_PROCESSED = "mark_applications_as_processed"
    MARK_ALL_APPLICATIONS_AS_PROCESSED = "mark_all_applications_as_processed"
    SAVE_APPLICATION_EVALUATION = "save_application_evaluation"

    # Candidate research
    PARSE_RESUME = "parse_resume"
    GET_LINKEDIN_PROFILE = "get_linkedin_profile"

    # Email
    SEND_EMAIL = "send_email"
    SEND_EVALUATION_RESULT_EMAIL = "send_evaluation_result_email"


class ResumeContentType(StrEnum):
    """Content types accepted for uploaded resumes."""

    PDF = "application/pdf"
    DOC = "application/msword"
    DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    TXT = "text/plain"
    OCTET_STREAM = "application/octet-stream"
