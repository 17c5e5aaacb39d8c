"""Binds tool definitions to their handlers.

``build_registry`` is called once at startup with the services the handlers
need. Each tool becomes a ``BoundTool``: a descriptor plus a handler closed
over the shared HandlerContext.
"""

import logging
from typing import Any

from ..mcp.registry import ToolDescriptor, ToolRegistry
from ..mcp.tool_defs import TOOL_DEFINITIONS
from ..models import ToolName
from .handlers import (
    HandlerContext,
    HandlerFunc,
    handle_get_all_applications,
    handle_get_application_details,
    handle_get_linkedin_profile,
    handle_get_unprocessed_applications,
    handle_mark_all_applications_as_processed,
    handle_mark_application_as_processed,
    handle_mark_applications_as_processed,
    handle_parse_resume,
    handle_save_application_evaluation,
    handle_send_email,
    handle_send_evaluation_result_email,
)

logger = logging.getLogger(__name__)

TOOL_HANDLERS: dict[ToolName, HandlerFunc] = {
    ToolName.GET_UNPROCESSED_APPLICATIONS: handle_get_unprocessed_applications,
    ToolName.GET_APPLICATION_DETAILS: handle_get_application_details,
    ToolName.GET_ALL_APPLICATIONS: handle_get_all_applications,
    ToolName.MARK_APPLICATION_AS_PROCESSED: handle_mark_application_as_processed,
    ToolName.MARK_APPLICATIONS_AS_PROCESSED: handle_mark_applications_as_processed,
    ToolName.MARK_ALL_APPLICATIONS_AS_PROCESSED: handle_mark_all_applications_as_processed,
    ToolName.SAVE_APPLICATION_EVALUATION: handle_save_application_evaluation,
    ToolName.PARSE_RESUME: handle_parse_resume,
    ToolName.GET_LINKEDIN_PROFILE: handle_get_linkedin_profile,
    ToolName.SEND_EMAIL: handle_send_email,
    ToolName.SEND_EVALUATION_RESULT_EMAIL: handle_send_evaluation_result_email,
}


class BoundTool:
    """A tool definition bound to its handler and context."""

    def __init__(self, definition: dict[str, Any], handler: HandlerFunc, ctx: HandlerContext):
        self._descriptor = ToolDescriptor.model_validate(definition)
        self._handler = handler
        self._ctx = ctx

    @property
    def name(self) -> str:
        return self._descriptor.name

    def descriptor(self) -> ToolDescriptor:
        return self._descriptor

    async def invoke(self, args: dict[str, Any]) -> Any:
        return await self._handler(args, self._ctx)


def build_registry(ctx: HandlerContext, registry: ToolRegistry | None = None) -> ToolRegistry:
    """Register every defined tool, in definition order.

    Raises:
        ValueError: A definition names an unknown tool
        KeyError: A known tool has no handler
    """
    registry = registry if registry is not None else ToolRegistry()
    for definition in TOOL_DEFINITIONS:
        handler = TOOL_HANDLERS[ToolName(definition["name"])]
        registry.register_capability(BoundTool(definition, handler, ctx))

    logger.info(f"[MCP] Registered {len(registry)} tools")
    return registry
