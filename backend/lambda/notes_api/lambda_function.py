"""notes_api/lambda_function.py

Lambda API for per-owner notes.
Handles create, list, get, update and delete of short text notes stored in
DynamoDB, partitioned by the caller's verified email.

Routes (via API Gateway proxy, with or without a stage prefix):
    POST    /notes                 — create note
    GET     /notes                 — list caller's notes, newest first
    GET     /notes/{note_id}       — get one note
    PUT     /notes/{note_id}       — partial update
    DELETE  /notes/{note_id}       — delete note
    OPTIONS /notes[/*]             — CORS preflight

Auth:
    API Gateway's Cognito authorizer verifies the token. The owner identity
    is read from the verified claims in requestContext.authorizer.

Environment variables:
    NOTES_TABLE       default: notes (fallback TABLE_NOTES)
    DYNAMODB_REGION   default: AWS_REGION, then us-east-1
    CORS_ORIGIN       default: *
    LOG_LEVEL         default: INFO
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Optional, Tuple

from notes_shared.http_utils import _error, _path_method, _path_param, _response

from config import NotesConfig
from handlers import (
    _handle_create,
    _handle_delete,
    _handle_get,
    _handle_list,
    _handle_update,
)

logger = logging.getLogger()

_NOTES_PATH_RE = re.compile(r"/notes(?:/(?P<note_id>[^/]+))?/?$")

_config: Optional[NotesConfig] = None


def _get_config() -> NotesConfig:
    """Get (or build) the process-wide configuration."""
    global _config
    if _config is None:
        _config = NotesConfig.from_env()
    return _config


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------

Handler = Callable[[Dict[str, Any], NotesConfig, Optional[str]], Dict[str, Any]]

_ROUTES: Dict[Tuple[str, bool], Handler] = {
    ("POST", False): lambda event, config, _note_id: _handle_create(event, config),
    ("GET", False): lambda event, config, _note_id: _handle_list(event, config),
    ("GET", True): _handle_get,
    ("PUT", True): _handle_update,
    ("DELETE", True): _handle_delete,
}


def _parse_request(event: Dict[str, Any]) -> Tuple[str, str, bool, Optional[str]]:
    """Return (method, path, is_notes_path, note_id) for an API Gateway event."""
    method, path = _path_method(event)
    match = _NOTES_PATH_RE.search(path)
    note_id = _path_param(event, "note_id", "noteId")
    if not note_id and match:
        note_id = match.group("note_id")
    logger.info("request parse: method=%s path=%s note_id=%s", method, path, note_id)
    return method, path, match is not None, note_id


def _dispatch(event: Dict[str, Any], config: NotesConfig) -> Dict[str, Any]:
    method, path, is_notes_path, note_id = _parse_request(event)

    # CORS preflight carries no credentials
    if method == "OPTIONS":
        return _response(200, {"message": "OK"})

    handler = _ROUTES.get((method, bool(note_id))) if is_notes_path else None
    if handler is None:
        logger.warning(
            "no route matched: method=%s path=%s note_id=%s resource=%s",
            method, path, note_id, event.get("resource"),
        )
        return _error(404, "Not found")
    return handler(event, config, note_id)


def route(event: Dict[str, Any], config: NotesConfig) -> Dict[str, Any]:
    try:
        return _dispatch(event, config)
    except Exception:
        logger.exception("unhandled error while routing request")
        return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    try:
        config = _get_config()
    except Exception:
        logger.exception("configuration failed")
        return _error(500, "Internal server error")
    return route(event, config)
