"""models.py — Note record, create/update input parsing and validation."""
from __future__ import annotations

import secrets
import time
import uuid
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Union

from notes_shared.errors import ValidationError
from notes_shared.serialization import _deserialize, _serialize_item

from config import MAX_CONTENT_LENGTH, MAX_TAG_LENGTH, MAX_TAGS, MAX_TITLE_LENGTH

__all__ = [
    "MUTABLE_FIELDS",
    "Note",
    "NoteUpdate",
    "UNSET",
    "_new_note_id",
]

MUTABLE_FIELDS = ("title", "content", "tags")


class _Unset:
    """Marker for a field the client did not send."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _new_note_id() -> str:
    """Time-ordered, UUID-shaped note id.

    The high 64 bits hold the nanosecond wall clock and the low 64 bits are
    random, so string order of ids follows creation order.
    """
    return str(uuid.UUID(int=(time.time_ns() << 64) | secrets.randbits(64)))


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------


def _text_field(body: Dict[str, Any], name: str, limit: int) -> str:
    value = body.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string.")
    if len(value) > limit:
        raise ValidationError(f"'{name}' exceeds {limit} characters.")
    return value


def _tags_field(body: Dict[str, Any]) -> List[str]:
    value = body.get("tags")
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError("'tags' must be a list of strings.")
    if len(value) > MAX_TAGS:
        raise ValidationError(f"'tags' exceeds {MAX_TAGS} entries.")
    for tag in value:
        if not isinstance(tag, str):
            raise ValidationError("'tags' must be a list of strings.")
        if len(tag) > MAX_TAG_LENGTH:
            raise ValidationError(f"Tag exceeds {MAX_TAG_LENGTH} characters.")
    return list(value)


_PARSERS = {
    "title": lambda body: _text_field(body, "title", MAX_TITLE_LENGTH),
    "content": lambda body: _text_field(body, "content", MAX_CONTENT_LENGTH),
    "tags": _tags_field,
}


# ---------------------------------------------------------------------------
# Note
# ---------------------------------------------------------------------------


@dataclass
class Note:
    owner_id: str
    note_id: str
    title: str = ""
    content: str = ""
    tags: List[str] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, owner_id: str, body: Dict[str, Any], now: str) -> "Note":
        """Build a fresh note from a create request body.

        Raises ValidationError when both title and content are blank.
        """
        title = _PARSERS["title"](body)
        content = _PARSERS["content"](body)
        tags = _PARSERS["tags"](body)
        if not title.strip() and not content.strip():
            raise ValidationError("Title or content is required")
        return cls(
            owner_id=owner_id,
            note_id=_new_note_id(),
            title=title,
            content=content,
            tags=tags,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Note":
        """Build a Note from a raw DynamoDB item."""
        data = _deserialize(item)
        return cls(
            owner_id=data.get("owner_id", ""),
            note_id=data.get("note_id", ""),
            title=data.get("title") or "",
            content=data.get("content") or "",
            tags=list(data.get("tags") or []),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )

    def to_item(self) -> Dict[str, Any]:
        return _serialize_item({f.name: getattr(self, f.name) for f in fields(self)})

    def public(self) -> Dict[str, Any]:
        """Client-facing fields; owner_id stays server-side."""
        return {
            "note_id": self.note_id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# ---------------------------------------------------------------------------
# Partial update
# ---------------------------------------------------------------------------


@dataclass
class NoteUpdate:
    """Presence-tracked partial update.

    A field left at UNSET was omitted by the client and is not touched. A
    field sent as "" / [] (or null, normalised to those) is an explicit change.
    """

    title: Union[str, _Unset] = UNSET
    content: Union[str, _Unset] = UNSET
    tags: Union[List[str], _Unset] = UNSET

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "NoteUpdate":
        values = {name: _PARSERS[name](body) for name in MUTABLE_FIELDS if name in body}
        if not values:
            raise ValidationError("No fields to update")
        return cls(**values)

    def changes(self) -> Dict[str, Any]:
        """Fields the client supplied, in a stable order."""
        return {
            name: getattr(self, name)
            for name in MUTABLE_FIELDS
            if not isinstance(getattr(self, name), _Unset)
        }
