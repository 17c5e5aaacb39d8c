"""REST API routers and shared dependencies.

This package contains:
- deps: FastAPI dependency injection functions
- job_postings, applications, evaluations: Record endpoints
- tools: REST equivalents of the MCP tools
"""

from .applications import router as applications_router
from .deps import sanitize_error_message
from .evaluations import router as evaluations_router
from .job_postings import router as job_postings_router
from .tools import router as tools_router

__all__ = [
    "applications_router",
    "evaluations_router",
    "job_postings_router",
    "tools_router",
    "sanitize_error_message",
]
