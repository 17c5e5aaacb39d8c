"""REST equivalents of the MCP tools.

Lets operators and scripts call the same services the agent uses without
speaking JSON-RPC.

Base URL: /mcp
"""

import logging
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends, HTTPException

from ..engine.handlers.base import HandlerContext
from ..mcp.registry import ToolExecutionError, ToolNotFoundError, ToolRegistry
from ..mcp.tool_defs import get_tool_category
from ..models import (
    EvaluationCreate,
    LinkedinProfileParams,
    MarkProcessedParams,
    ParseResumeParams,
    SendEmailParams,
    ToolCallParams,
)
from .deps import get_handler_context, get_registry, sanitize_error_message

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mcp", tags=["MCP REST"])

Context = Annotated[HandlerContext, Depends(get_handler_context)]


# ============ TOOL DISCOVERY AND EXECUTION ============


@router.get("/tools")
async def list_tools(registry: Annotated[ToolRegistry, Depends(get_registry)]) -> dict:
    tools = []
    for descriptor in registry.list_tools():
        category = get_tool_category(descriptor.name)
        tools.append(
            {**descriptor.public(), "category": category.value if category else None}
        )
    return {"count": len(tools), "tools": tools}


@router.post("/tools/call")
async def call_tool(
    body: ToolCallParams,
    registry: Annotated[ToolRegistry, Depends(get_registry)],
) -> dict:
    """
    Execute a tool directly.

    Returns:
        The tool's raw result, without the MCP content envelope
    """
    try:
        result = await registry.invoke(body.tool, body.arguments)
    except ToolNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except ToolExecutionError as e:
        raise HTTPException(status_code=400, detail=sanitize_error_message(e)) from e
    return {"tool": body.tool.value, "result": result}


# ============ CANDIDATE RESEARCH ============


@router.post("/linkedin/profile")
async def get_linkedin_profile(body: LinkedinProfileParams, ctx: Context) -> Any:
    try:
        return await ctx.linkedin.get_profile(body.profile_url)
    except ValueError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except httpx.HTTPError as e:
        logger.warning(f"Profile lookup failed for {body.profile_url}: {e}")
        raise HTTPException(status_code=502, detail="Profile lookup failed.") from e


@router.post("/resume/parse")
async def parse_resume(body: ParseResumeParams, ctx: Context) -> dict:
    result = await ctx.resume_parser.parse_resume(body.resume_url)
    return result.to_wire()


# ============ EMAIL ============


@router.post("/email/send")
async def send_email(body: SendEmailParams, ctx: Context) -> bool:
    return await ctx.email.send_email_by_address(body.email, body.subject, body.body)


# ============ APPLICATIONS ============


@router.get("/applications")
async def get_all_applications(ctx: Context) -> list[dict]:
    return [application.to_wire() for application in await ctx.applications.list_applications()]


@router.get("/applications/unprocessed")
async def get_unprocessed_applications(ctx: Context) -> list[dict]:
    return [application.to_wire() for application in await ctx.applications.list_unprocessed()]


@router.get("/applications/{application_id}/details")
async def get_application_details(application_id: int, ctx: Context) -> dict:
    details = await ctx.applications.get_application_details(application_id)
    if details is None:
        raise HTTPException(status_code=404, detail=f"Application {application_id} not found")
    return details.to_wire()


@router.post("/applications/mark-all-processed")
async def mark_all_processed(ctx: Context) -> int:
    return await ctx.applications.mark_all_unprocessed_as_processed()


@router.post("/applications/mark-processed")
async def mark_processed(body: MarkProcessedParams, ctx: Context) -> int:
    return await ctx.applications.mark_as_processed(body.ids)


@router.post("/applications/{application_id}/mark-processed")
async def mark_one_processed(application_id: int, ctx: Context) -> int:
    return await ctx.applications.mark_as_processed([application_id])


@router.post("/evaluations")
async def save_evaluation(body: EvaluationCreate, ctx: Context) -> bool:
    return await ctx.evaluations.save(body)
