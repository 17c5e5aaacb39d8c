"""Application tool handlers.

Handles:
- get_unprocessed_applications: Applications not yet picked up by an agent
- get_application_details: Application joined with its job posting
- get_all_applications: Every application
- mark_application_as_processed / mark_applications_as_processed /
  mark_all_applications_as_processed: Processing state updates
- save_application_evaluation: Persist an agent's evaluation
"""

from typing import Any

from pydantic import ValidationError

from ...mcp.registry import ToolError
from ...models import EvaluationCreate
from .base import HandlerContext, require_int


async def handle_get_unprocessed_applications(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> list[dict[str, Any]]:
    applications = await ctx.applications.list_unprocessed()
    return [application.to_wire() for application in applications]


async def handle_get_application_details(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> dict[str, Any] | None:
    """Return applicantId, jobId, jobDescription and resumeUrl.

    Args:
        params: Dict containing:
            - applicantId: The job application ID

    Returns:
        The details, or None when the application or its posting is missing
    """
    applicant_id = require_int(params, "applicantId")
    details = await ctx.applications.get_application_details(applicant_id)
    return details.to_wire() if details else None


async def handle_get_all_applications(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> list[dict[str, Any]]:
    applications = await ctx.applications.list_applications()
    return [application.to_wire() for application in applications]


async def handle_mark_application_as_processed(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> int:
    application_id = require_int(params, "applicationId")
    return await ctx.applications.mark_as_processed([application_id])


async def handle_mark_applications_as_processed(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> int:
    """Mark several applications as processed.

    Returns:
        How many applications changed state
    """
    ids = params.get("applicationIds") or []
    if not isinstance(ids, list):
        raise ToolError("Invalid parameter: applicationIds must be an array")

    application_ids = [
        require_int({"applicationIds": value}, "applicationIds") for value in ids
    ]
    return await ctx.applications.mark_as_processed(application_ids)


async def handle_mark_all_applications_as_processed(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> int:
    return await ctx.applications.mark_all_unprocessed_as_processed()


async def handle_save_application_evaluation(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> bool:
    """Persist an evaluation written by the agent.

    A missing or non-positive jobApplicationId is answered with False rather
    than an error.
    """
    application_id = params.get("jobApplicationId")
    if not isinstance(application_id, (int, float)) or application_id <= 0:
        return False

    try:
        evaluation = EvaluationCreate.model_validate(params)
    except ValidationError as e:
        raise ToolError(
            "Invalid parameter: evaluation is incomplete",
            {"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    return await ctx.evaluations.save(evaluation)
