"""handlers.py — CRUD route handlers for notes.

Each handler resolves the caller, validates input, runs one store operation
and maps taxonomy errors to a response envelope. Unexpected exceptions are
left to the router's catch-all.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from notes_shared.auth import _resolve_owner
from notes_shared.errors import NotesError, ValidationError
from notes_shared.http_utils import _error_from, _parse_body, _response
from notes_shared.serialization import _now_z

from config import NotesConfig
from models import Note, NoteUpdate
from persistence import _delete_note, _get_note, _put_note, _query_notes, _update_note

__all__ = [
    "_handle_create",
    "_handle_delete",
    "_handle_get",
    "_handle_list",
    "_handle_update",
]

logger = logging.getLogger(__name__)


def _require_note_id(note_id: Optional[str]) -> str:
    if not note_id:
        raise ValidationError("Note ID is required")
    return note_id


def _handle_create(event: Dict[str, Any], config: NotesConfig) -> Dict[str, Any]:
    try:
        owner_id = _resolve_owner(event)
        note = Note.new(owner_id, _parse_body(event), _now_z())
        _put_note(config, note)
    except NotesError as exc:
        return _error_from(exc)

    logger.info("note created: %s owner=%s", note.note_id, owner_id)
    return _response(201, {
        "success": True,
        "message": "Note created successfully",
        "note": note.public(),
    })


def _handle_list(event: Dict[str, Any], config: NotesConfig) -> Dict[str, Any]:
    try:
        owner_id = _resolve_owner(event)
        notes = _query_notes(config, owner_id)
    except NotesError as exc:
        return _error_from(exc)

    return _response(200, {
        "success": True,
        "notes": [note.public() for note in notes],
        "count": len(notes),
    })


def _handle_get(event: Dict[str, Any], config: NotesConfig, note_id: Optional[str]) -> Dict[str, Any]:
    try:
        owner_id = _resolve_owner(event)
        note = _get_note(config, owner_id, _require_note_id(note_id))
    except NotesError as exc:
        return _error_from(exc)

    return _response(200, {"success": True, "note": note.public()})


def _handle_update(event: Dict[str, Any], config: NotesConfig, note_id: Optional[str]) -> Dict[str, Any]:
    try:
        owner_id = _resolve_owner(event)
        note_id = _require_note_id(note_id)
        update = NoteUpdate.from_body(_parse_body(event))
        note = _update_note(config, owner_id, note_id, update, _now_z())
    except NotesError as exc:
        return _error_from(exc)

    logger.info("note updated: %s fields=%s", note_id, sorted(update.changes()))
    return _response(200, {
        "success": True,
        "message": "Note updated successfully",
        "note": note.public(),
    })


def _handle_delete(event: Dict[str, Any], config: NotesConfig, note_id: Optional[str]) -> Dict[str, Any]:
    try:
        owner_id = _resolve_owner(event)
        note_id = _require_note_id(note_id)
        _delete_note(config, owner_id, note_id)
    except NotesError as exc:
        return _error_from(exc)

    logger.info("note deleted: %s owner=%s", note_id, owner_id)
    return _response(200, {"success": True, "message": "Note deleted successfully"})
