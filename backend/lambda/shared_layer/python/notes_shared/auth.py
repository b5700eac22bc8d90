"""notes_shared.auth — Caller identity from gateway-verified Cognito claims.

API Gateway validates the Cognito token before the Lambda runs, so the claims
found in ``requestContext.authorizer`` are trusted as-is. Different gateway
front-ends nest the claims differently; each layout is handled by one
extraction strategy, tried in order until one yields an owner identifier.

Supported layouts:
    REST API Cognito authorizer   requestContext.authorizer.claims.email
    REST API (username = email)   requestContext.authorizer.claims["cognito:username"]
    HTTP API JWT authorizer       requestContext.authorizer.jwt.claims.email
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Dict, Optional, Sequence

from .errors import AuthenticationError

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

IdentityStrategy = Callable[[Dict[str, Any]], Optional[str]]


def _authorizer(event: Dict[str, Any]) -> Dict[str, Any]:
    """Return the authorizer context of an API Gateway event, or {}."""
    rc = event.get("requestContext") or {}
    authorizer = rc.get("authorizer") or {}
    return authorizer if isinstance(authorizer, dict) else {}


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _looks_like_owner_id(value: Optional[str]) -> bool:
    return bool(value) and bool(_EMAIL_RE.match(value))


# ---------------------------------------------------------------------------
# Extraction strategies
# ---------------------------------------------------------------------------


def _email_claim(authorizer: Dict[str, Any]) -> Optional[str]:
    claims = authorizer.get("claims") or {}
    return _clean(claims.get("email")) if isinstance(claims, dict) else None


def _username_claim(authorizer: Dict[str, Any]) -> Optional[str]:
    """Pools configured with email-as-username only carry cognito:username."""
    claims = authorizer.get("claims") or {}
    if not isinstance(claims, dict):
        return None
    username = _clean(claims.get("cognito:username"))
    return username if _looks_like_owner_id(username) else None


def _jwt_email_claim(authorizer: Dict[str, Any]) -> Optional[str]:
    jwt_ctx = authorizer.get("jwt") or {}
    claims = jwt_ctx.get("claims") if isinstance(jwt_ctx, dict) else None
    return _clean(claims.get("email")) if isinstance(claims, dict) else None


IDENTITY_STRATEGIES: Sequence[IdentityStrategy] = (
    _email_claim,
    _username_claim,
    _jwt_email_claim,
)


def _resolve_owner(
    event: Dict[str, Any],
    strategies: Sequence[IdentityStrategy] = IDENTITY_STRATEGIES,
) -> str:
    """Return the caller's owner identifier or raise AuthenticationError."""
    authorizer = _authorizer(event)
    for strategy in strategies:
        owner_id = strategy(authorizer)
        if owner_id:
            return owner_id

    logger.warning(
        "auth: no owner identity in authorizer context. authorizer_keys=%s",
        sorted(authorizer.keys()),
    )
    raise AuthenticationError()
