"""Candidate research tool handlers.

Handles:
- parse_resume: Structured data from a resume PDF
- get_linkedin_profile: Profile data for a LinkedIn URL
"""

from typing import Any

from ...mcp.registry import ToolError
from .base import HandlerContext


async def handle_parse_resume(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> dict[str, Any]:
    """Parse a resume. Failures are reported in ErrorMessage, never raised."""
    resume_url = params.get("resumeUrl")
    result = await ctx.resume_parser.parse_resume(
        resume_url if isinstance(resume_url, str) else None
    )
    return result.to_wire()


async def handle_get_linkedin_profile(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> Any:
    profile_url = params.get("profileUrl")
    if not isinstance(profile_url, str) or not profile_url:
        raise ToolError("Invalid parameter: profileUrl is required")
    return await ctx.linkedin.get_profile(profile_url)
