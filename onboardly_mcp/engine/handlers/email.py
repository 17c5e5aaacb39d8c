"""Email tool handlers.

Handles:
- send_email: Plain-text email to one address
- send_evaluation_result_email: Pass or rejection email for an application
"""

from typing import Any

from pydantic import ValidationError

from ...mcp.registry import ToolError
from ...models import EvaluationEmailParams
from .base import HandlerContext


async def handle_send_email(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> bool:
    missing = [key for key in ("email", "subject", "body") if not isinstance(params.get(key), str)]
    if missing:
        raise ToolError(f"Invalid parameter: missing {', '.join(missing)}")

    return await ctx.email.send_email_by_address(
        params["email"], params["subject"], params["body"]
    )


async def handle_send_evaluation_result_email(
    params: dict[str, Any],
    ctx: HandlerContext,
) -> dict[str, Any]:
    """Send the evaluation outcome to the candidate behind an application.

    Candidate name, email and job title are looked up from the application.

    Args:
        params: Dict containing:
            - jobApplicationId: Application the evaluation belongs to
            - finalAverageScore: Score from the evaluation (0-100)
            - emailSubject / emailBody: Message written by the agent
            - meetingUrlBase: Optional meeting URL base override
            - thresholdScore: Optional pass threshold override
            - isSuccess: Optional explicit outcome, overrides the threshold

    Returns:
        Summary of the outcome and delivery
    """
    try:
        args = EvaluationEmailParams.model_validate(params)
    except ValidationError as e:
        raise ToolError(
            "Invalid parameter: jobApplicationId, finalAverageScore, emailSubject "
            "and emailBody are required",
            {"errors": e.errors(include_url=False, include_context=False)},
        ) from e

    candidate = await ctx.applications.get_candidate(args.job_application_id)
    if candidate is None:
        raise ToolError(f"Application with ID {args.job_application_id} not found")

    result = await ctx.email.send_evaluation_result_email(
        candidate,
        args.final_average_score,
        args.email_subject,
        args.email_body,
        meeting_url_base=args.meeting_url_base,
        threshold_score=args.threshold_score,
        is_success=args.is_success,
    )
    return result.to_wire()
