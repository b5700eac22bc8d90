"""post_confirmation/lambda_function.py

Cognito post-confirmation trigger for the Notes user pool.
Creates the user's profile record in DynamoDB after email verification.

Best effort: Cognito blocks sign-in when a trigger fails, so every failure is
logged and the event is always returned unchanged. An existing profile is a
no-op success.

Environment variables:
    USERS_TABLE       default: users (fallback TABLE_USERS)
    DYNAMODB_REGION   default: AWS_REGION, then us-east-1
    LOG_LEVEL         default: INFO
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from notes_shared.aws_clients import _get_ddb
from notes_shared.errors import (
    ConflictError,
    InternalError,
    NotesError,
    _is_conditional_check_failed,
)
from notes_shared.serialization import _now_z, _serialize_item

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

USERS_TABLE = os.environ.get("USERS_TABLE", os.environ.get("TABLE_USERS", "users"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logger = logging.getLogger()
logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))


def _build_profile(attrs: Dict[str, Any], cognito_sub: str) -> Optional[Dict[str, Any]]:
    """Profile record for a confirmed user, or None when email is missing."""
    email = (attrs.get("email") or "").strip()
    if not email:
        return None
    given_name = attrs.get("given_name") or ""
    family_name = attrs.get("family_name") or ""
    now = _now_z()
    return {
        "email": email,
        "cognito_sub": cognito_sub,
        "name": f"{given_name} {family_name}".strip() or email.split("@")[0],
        "given_name": given_name,
        "family_name": family_name,
        "account_status": "active",
        "profile": {
            "notes_count": 0,
            "last_note_date": None,
        },
        "last_login": now,
        "created_at": now,
        "updated_at": now,
    }


def _put_profile(profile: Dict[str, Any]) -> None:
    """Create-if-absent write keyed by email."""
    ddb = _get_ddb()
    try:
        ddb.put_item(
            TableName=USERS_TABLE,
            Item=_serialize_item(profile),
            ConditionExpression="attribute_not_exists(email)",
        )
    except (ClientError, BotoCoreError) as exc:
        if _is_conditional_check_failed(exc):
            raise ConflictError("Profile already exists") from exc
        raise InternalError("Failed to create profile") from exc


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    request = event.get("request") or {}
    attrs = request.get("userAttributes") or {}
    cognito_sub = attrs.get("sub") or event.get("userName")

    if not attrs or not cognito_sub:
        logger.warning("post-confirmation: empty or incomplete event, skipping profile creation")
        return event

    profile = _build_profile(attrs, cognito_sub)
    if profile is None:
        logger.error("post-confirmation: missing email attribute for sub=%s", cognito_sub)
        return event

    try:
        _put_profile(profile)
    except ConflictError:
        logger.info("post-confirmation: profile already exists: %s", profile["email"])
        return event
    except NotesError as exc:
        logger.error(
            "post-confirmation: profile write failed for %s: %s (cause: %s)",
            profile["email"], exc.message, exc.__cause__,
        )
        return event

    logger.info("post-confirmation: profile created: %s", profile["email"])
    return event
