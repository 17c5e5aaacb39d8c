"""FastAPI dependency injection functions.

This module contains shared dependencies for API endpoints:
- Access to the MCP dispatcher, registry and connection manager
- Access to the business services built at startup
- Error sanitization
"""

import logging

from fastapi import Request

from ..engine.handlers.base import HandlerContext
from ..mcp.connections import ConnectionManager
from ..mcp.dispatcher import Dispatcher
from ..mcp.registry import ToolRegistry
from ..services.applications import ApplicationService, EvaluationService, JobPostingService
from ..services.email import EmailService
from ..services.linkedin import LinkedinProfileService
from ..services.resume_parser import ResumeParserService
from ..services.storage import StorageService

logger = logging.getLogger(__name__)


# ============ ERROR SANITIZATION ============


def sanitize_error_message(error: Exception) -> str:
    """
    Sanitize error messages to prevent information disclosure.

    Returns a generic message for unexpected errors while preserving
    useful information for known error types.
    """
    error_str = str(error)

    # Known safe error patterns that can be returned to client
    safe_patterns = [
        "not found",
        "Tool execution failed",
        "Resume file is required",
        "Failed to save",
        "Invalid parameter",
        "not configured",
    ]

    for pattern in safe_patterns:
        if pattern.lower() in error_str.lower():
            return error_str

    # Log the actual error for debugging
    logger.error(f"Request error: {error}", exc_info=True)

    # Return generic message for unknown errors
    return "An error occurred processing your request. Please try again."


# ============ STATE ACCESSORS ============


def get_handler_context(request: Request) -> HandlerContext:
    return request.app.state.context


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


def get_registry(request: Request) -> ToolRegistry:
    return request.app.state.registry


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.connections


def get_application_service(request: Request) -> ApplicationService:
    return get_handler_context(request).applications


def get_job_posting_service(request: Request) -> JobPostingService:
    return get_handler_context(request).job_postings


def get_evaluation_service(request: Request) -> EvaluationService:
    return get_handler_context(request).evaluations


def get_email_service(request: Request) -> EmailService:
    return get_handler_context(request).email


def get_resume_parser(request: Request) -> ResumeParserService:
    return get_handler_context(request).resume_parser


def get_linkedin_service(request: Request) -> LinkedinProfileService:
    return get_handler_context(request).linkedin


def get_storage_service(request: Request) -> StorageService:
    return get_handler_context(request).storage
