"""persistence.py — DynamoDB persistence for notes.

Every operation touches exactly one item keyed (owner_id, note_id), except
the partition query behind List. Conditional-check failures surface as
NotFoundError; any other store failure is logged and surfaces as
InternalError.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List

from botocore.exceptions import BotoCoreError, ClientError

from notes_shared.errors import InternalError, NotFoundError, _is_conditional_check_failed
from notes_shared.serialization import _serialize

from config import NotesConfig
from models import Note, NoteUpdate

__all__ = [
    "_delete_note",
    "_get_note",
    "_note_key",
    "_put_note",
    "_query_notes",
    "_update_note",
]

logger = logging.getLogger(__name__)

_NOTE_EXISTS = "attribute_exists(note_id)"


def _note_key(owner_id: str, note_id: str) -> Dict[str, Any]:
    return {"owner_id": _serialize(owner_id), "note_id": _serialize(note_id)}


def _put_note(config: NotesConfig, note: Note) -> None:
    """Write a new note. Ids are fresh, so the write is unconditional."""
    try:
        config.ddb.put_item(TableName=config.notes_table, Item=note.to_item())
    except (ClientError, BotoCoreError) as exc:
        logger.error("put_item failed: owner=%s note=%s err=%s", note.owner_id, note.note_id, exc)
        raise InternalError("Failed to create note") from exc


def _get_note(config: NotesConfig, owner_id: str, note_id: str) -> Note:
    try:
        resp = config.ddb.get_item(
            TableName=config.notes_table,
            Key=_note_key(owner_id, note_id),
            ConsistentRead=True,
        )
    except (ClientError, BotoCoreError) as exc:
        logger.error("get_item failed: note=%s err=%s", note_id, exc)
        raise InternalError("Failed to get note") from exc

    item = resp.get("Item")
    if not item:
        raise NotFoundError("Note not found")
    return Note.from_item(item)


def _query_notes(config: NotesConfig, owner_id: str) -> List[Note]:
    """All notes in the owner's partition, newest note_id first."""
    params: Dict[str, Any] = {
        "TableName": config.notes_table,
        "KeyConditionExpression": "owner_id = :owner",
        "ExpressionAttributeValues": {":owner": _serialize(owner_id)},
        "ScanIndexForward": False,
    }
    notes: List[Note] = []
    while True:
        try:
            resp = config.ddb.query(**params)
        except (ClientError, BotoCoreError) as exc:
            logger.error("query failed: owner=%s err=%s", owner_id, exc)
            raise InternalError("Failed to get notes") from exc
        notes.extend(Note.from_item(item) for item in resp.get("Items", []))
        last_key = resp.get("LastEvaluatedKey")
        if not last_key:
            return notes
        params["ExclusiveStartKey"] = last_key


def _update_note(
    config: NotesConfig,
    owner_id: str,
    note_id: str,
    update: NoteUpdate,
    now: str,
) -> Note:
    """Apply a partial update and refresh updated_at in one conditional write."""
    changes = dict(update.changes())
    changes["updated_at"] = now

    expr_parts: List[str] = []
    attr_names: Dict[str, str] = {}
    attr_values: Dict[str, Any] = {}
    for name, value in changes.items():
        expr_parts.append(f"#{name} = :{name}")
        attr_names[f"#{name}"] = name
        attr_values[f":{name}"] = _serialize(value)

    try:
        resp = config.ddb.update_item(
            TableName=config.notes_table,
            Key=_note_key(owner_id, note_id),
            UpdateExpression="SET " + ", ".join(expr_parts),
            ConditionExpression=_NOTE_EXISTS,
            ExpressionAttributeNames=attr_names,
            ExpressionAttributeValues=attr_values,
            ReturnValues="ALL_NEW",
        )
    except (ClientError, BotoCoreError) as exc:
        if _is_conditional_check_failed(exc):
            raise NotFoundError("Note not found") from exc
        logger.error("update_item failed: note=%s err=%s", note_id, exc)
        raise InternalError("Failed to update note") from exc
    return Note.from_item(resp.get("Attributes") or {})


def _delete_note(config: NotesConfig, owner_id: str, note_id: str) -> None:
    try:
        config.ddb.delete_item(
            TableName=config.notes_table,
            Key=_note_key(owner_id, note_id),
            ConditionExpression=_NOTE_EXISTS,
        )
    except (ClientError, BotoCoreError) as exc:
        if _is_conditional_check_failed(exc):
            raise NotFoundError("Note not found") from exc
        logger.error("delete_item failed: note=%s err=%s", note_id, exc)
        raise InternalError("Failed to delete note") from exc
