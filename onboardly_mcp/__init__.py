"""Onboardly MCP Server - hiring tools exposed over MCP (JSON-RPC 2.0 + SSE)."""

__version__ = "1.0.0"
