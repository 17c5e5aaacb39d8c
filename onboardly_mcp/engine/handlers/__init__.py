"""Tool handlers for the Onboardly MCP server.

This package contains tool handlers organized by domain:
- applications: Application records, processing state and evaluations
- research: Resume parsing and LinkedIn profile lookup
- email: Candidate emails

Each handler is a standalone async function that takes:
- params: dict[str, Any] - Tool arguments from the MCP call
- ctx: HandlerContext - Shared services

And returns a JSON-serializable result.
"""

from .applications import (
    handle_get_all_applications,
    handle_get_application_details,
    handle_get_unprocessed_applications,
    handle_mark_all_applications_as_processed,
    handle_mark_application_as_processed,
    handle_mark_applications_as_processed,
    handle_save_application_evaluation,
)
from .base import HandlerContext, HandlerFunc, require_int
from .email import handle_send_email, handle_send_evaluation_result_email
from .research import handle_get_linkedin_profile, handle_parse_resume

__all__ = [
    # Base
    "HandlerContext",
    "HandlerFunc",
    "require_int",
    # Application handlers
    "handle_get_all_applications",
    "handle_get_application_details",
    "handle_get_unprocessed_applications",
    "handle_mark_all_applications_as_processed",
    "handle_mark_application_as_processed",
    "handle_mark_applications_as_processed",
    "handle_save_application_evaluation",
    # Research handlers
    "handle_get_linkedin_profile",
    "handle_parse_resume",
    # Email handlers
    "handle_send_email",
    "handle_send_evaluation_result_email",
]
