"""
JSON envelope helpers shared by every app's views.

Success: {"success": true, ...payload}
Failure: {"success": false, "error": "message", ...extra}
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID

from django.http import JsonResponse


class InvalidJSONBody(ValueError):
    """Raised when a request body is not a JSON object."""


def success_response(status: int = 200, **payload: Any) -> JsonResponse:
    return JsonResponse({"success": True, **payload}, status=status)


def error_response(message: str, status: int = 400, **extra: Any) -> JsonResponse:
    return JsonResponse({"success": False, "error": message, **extra}, status=status)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported JSON constant: {name}")


def parse_json_body(request) -> dict[str, Any]:
    """
    Parse the request body as a JSON object. An empty body is {}.
    NaN and Infinity literals are rejected.

    Raises:
        InvalidJSONBody: If the body is not valid JSON or not an object
    """
    if not request.body:
        return {}
    try:
        body = json.loads(request.body, parse_constant=_reject_constant)
    except (ValueError, UnicodeDecodeError) as exc:
        raise InvalidJSONBody("Invalid JSON body") from exc
    if not isinstance(body, dict):
        raise InvalidJSONBody("Invalid JSON body")
    return body


def parse_uuid(value: Any) -> UUID | None:
    """Parse a value to UUID, returning None on failure."""
    try:
        return UUID(str(value))
    except (ValueError, TypeError):
        return None
