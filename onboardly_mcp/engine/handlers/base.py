"""Base infrastructure for tool handlers.

This module provides the common types used by all handler modules.
Each handler receives the tool arguments and a HandlerContext holding the
services it may call, and returns a JSON-serializable result.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Coroutine

from ...mcp.registry import ToolError

if TYPE_CHECKING:
    from ...services.applications import (
        ApplicationService,
        EvaluationService,
        JobPostingService,
    )
    from ...services.email import EmailService
    from ...services.linkedin import LinkedinProfileService
    from ...services.resume_parser import ResumeParserService
    from ...services.storage import StorageService


@dataclass
class HandlerContext:
    """Services shared by all handlers and REST routes.

    Built once at startup; tests substitute fakes for any of them.
    """

    # Records
    applications: "ApplicationService"
    job_postings: "JobPostingService"
    evaluations: "EvaluationService"

    # Candidate research
    resume_parser: "ResumeParserService"
    linkedin: "LinkedinProfileService"

    # Outbound
    email: "EmailService"
    storage: "StorageService"


# Type alias for handler functions
HandlerFunc = Callable[
    [dict[str, Any], HandlerContext],
    Coroutine[Any, Any, Any],
]


def require_int(params: dict[str, Any], key: str) -> int:
    """Read a required integer argument.

    Raises:
        ToolError: The argument is missing or not an integer
    """
    value = params.get(key)
    # bool is an int subclass but never a valid id
    valid = isinstance(value, int) or (isinstance(value, float) and value.is_integer())
    if isinstance(value, bool) or not valid:
        raise ToolError(f"Invalid parameter: {key} must be an integer", {"received": value})
    return int(value)
