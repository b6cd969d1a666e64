"""
App-wide constants for route configuration.

This module provides a single source of truth for route prefixes, tags,
and common response definitions for API routes.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from userbase.models.error import ErrorResponse


@dataclass(frozen=True)
class RouteConfig:
    """Configuration for a route group."""

    prefix: str
    tag: str


class Routes:
    """Route configurations for all API endpoints."""

    USER = RouteConfig(prefix="/users", tag="users")
    ROLE = RouteConfig(prefix="/roles", tag="roles")
    HEALTH = RouteConfig(prefix="/health", tag="health")


# Common response definitions for reuse across routers
class CommonResponses:
    """Standard HTTP error response definitions for OpenAPI documentation."""

    NOT_FOUND: dict[int | str, dict[str, Any]] = {
        404: {"model": ErrorResponse, "description": "Resource not found"}
    }
    CONFLICT: dict[int | str, dict[str, Any]] = {
        409: {
            "model": ErrorResponse,
            "description": "Email or phone number already in use",
        }
    }
    BAD_REQUEST: dict[int | str, dict[str, Any]] = {
        400: {
            "model": ErrorResponse,
            "description": "Invalid request data or policy violation",
        }
    }


# HTML Templates Directory
EmailTemplatesDir = Path(__file__).parent.parent / "templates" / "emails"
CompiledEmailTemplatesDir = EmailTemplatesDir / "compiled"

# Jinja2 environment for compiled templates (used at runtime)
JinjaCompiledEmailTemplatesEnv = Environment(
    loader=FileSystemLoader(str(CompiledEmailTemplatesDir)),
    autoescape=select_autoescape(["html", "xml"]),
)
