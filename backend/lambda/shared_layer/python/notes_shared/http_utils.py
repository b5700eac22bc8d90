"""notes_shared.http_utils — HTTP response helpers with CORS.

Standard response envelope and error formatting used by the Notes API
Lambda. Every response, success or failure, carries the CORS headers so the
browser client can read it.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from .errors import NotesError, ValidationError

logger = logging.getLogger(__name__)

CORS_ORIGIN = os.environ.get("CORS_ORIGIN", "*")
CORS_HEADERS = {
    "Access-Control-Allow-Origin": CORS_ORIGIN,
    "Access-Control-Allow-Headers": "Content-Type,Authorization,X-Amz-Date,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
}


def _response(status_code: int, body: Any) -> Dict[str, Any]:
    """Build a standard API Gateway response with CORS headers."""
    return {
        "statusCode": status_code,
        "headers": {
            "Content-Type": "application/json",
            **CORS_HEADERS,
        },
        "body": json.dumps(body, default=str),
    }


def _error(status_code: int, message: str, **extra: Any) -> Dict[str, Any]:
    """Build a standard error response.

    Args:
        status_code: HTTP status code.
        message: Human-readable error message, safe for the caller.
        **extra: ``code`` and ``retryable`` override the envelope defaults;
                 anything else lands in ``error_envelope.details``.
    """
    code = str(extra.pop("code", "") or "").strip().upper()
    if not code:
        if status_code == 400:
            code = "INVALID_INPUT"
        elif status_code == 401:
            code = "PERMISSION_DENIED"
        elif status_code == 404:
            code = "NOT_FOUND"
        elif status_code == 409:
            code = "CONFLICT"
        else:
            code = "INTERNAL_ERROR"
    retryable = bool(extra.pop("retryable", status_code >= 500))
    payload: Dict[str, Any] = {
        "success": False,
        "error": message,
        "error_envelope": {
            "code": code,
            "message": message,
            "retryable": retryable,
            "details": dict(extra),
        },
    }
    return _response(status_code, payload)


def _error_from(exc: NotesError) -> Dict[str, Any]:
    """Map a taxonomy error to its response envelope."""
    return _error(exc.status_code, exc.message, code=exc.code)


def _parse_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Parse the JSON object body of an API Gateway event (handles base64).

    A missing body parses as ``{}``. Malformed JSON or a body that is not a
    JSON object raises ValidationError.
    """
    raw = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")
        body = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, TypeError) as exc:
        logger.warning("body parse failed: %s", exc)
        raise ValidationError("Request body must be valid JSON.") from exc
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body


def _path_method(event: Dict[str, Any]) -> Tuple[str, str]:
    """Extract HTTP method and path from an API Gateway v1 or v2 event."""
    rc = event.get("requestContext") or {}
    http = rc.get("http") or {}
    method = (event.get("httpMethod") or http.get("method") or "GET").upper()
    path = event.get("path") or event.get("rawPath") or http.get("path") or "/"
    return method, path


def _path_param(event: Dict[str, Any], *names: str) -> Optional[str]:
    """Return the first non-empty path parameter among ``names``."""
    params = event.get("pathParameters") or {}
    for name in names:
        value = params.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None
