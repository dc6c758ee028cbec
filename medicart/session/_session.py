"""
Session: identity of the signed-in user.

``SessionStore`` is the one owner: it loads at startup, starts at login and
clears at logout. Everything that needs identity gets the store injected.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger()

# Storage keys written by the login page
TOKEN_KEY = "accessToken"
USER_ID_KEY = "userId"
ROLE_KEY = "userRole"

_ABSENT = {"", "null", "undefined"}
_BEARER = "Bearer "


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return None if value in _ABSENT else value


# ═══════════════════════════════════════════════════════════════════════════════
# Token Payload
# ═══════════════════════════════════════════════════════════════════════════════


def decode_claims(token: str) -> dict[str, Any]:
    """
    Decode a JWT payload without verifying it.

    The gateway verifies signatures; the client only reads hints from the
    payload. Returns {} for anything that is not a readable JWT.
    """
    raw = token[len(_BEARER):] if token.startswith(_BEARER) else token
    parts = raw.split(".")
    if len(parts) != 3:
        return {}
    payload = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(payload))
    except (binascii.Error, ValueError):
        return {}
    return decoded if isinstance(decoded, dict) else {}


# ═══════════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Session:
    token: str | None = None
    user_id: str | None = None
    role: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def authorization(self) -> str | None:
        """Authorization header value, or None when signed out."""
        if self.token is None:
            return None
        return self.token if self.token.startswith(_BEARER) else _BEARER + self.token

    @property
    def user_id_hint(self) -> str | None:
        """X-User-Id value: the token's userId claim, else the stored id."""
        if self.token is not None:
            claim = decode_claims(self.token).get("userId")
            if claim is not None and str(claim).strip():
                return str(claim)
        return self.user_id


ANONYMOUS = Session()


class SessionStore:
    """Single owner of the current ``Session``."""

    def __init__(self, session: Session = ANONYMOUS) -> None:
        self._session = session

    @property
    def current(self) -> Session:
        return self._session

    def load(self, storage: Mapping[str, str | None]) -> Session:
        """Restore from key/value storage at startup."""
        token = _clean(storage.get(TOKEN_KEY))
        role = _clean(storage.get(ROLE_KEY))
        if token is not None and role is None:
            scope = decode_claims(token).get("scope")
            role = str(scope) if scope else None
        self._session = Session(
            token=token,
            user_id=_clean(storage.get(USER_ID_KEY)),
            role=role,
        )
        logger.debug(
            "session_loaded",
            authenticated=self._session.is_authenticated,
            role=self._session.role,
        )
        return self._session

    def start(
        self, token: str, user_id: str | int | None = None, role: str | None = None
    ) -> Session:
        self._session = Session(
            token=_clean(token),
            user_id=_clean(str(user_id)) if user_id is not None else None,
            role=_clean(role),
        )
        logger.info("session_started", user_id=self._session.user_id)
        return self._session

    def clear(self) -> None:
        self._session = ANONYMOUS
        logger.info("session_cleared")

    def dump(self) -> dict[str, str]:
        """Key/value form for writing back to storage."""
        out: dict[str, str] = {}
        if self._session.token is not None:
            out[TOKEN_KEY] = self._session.token
        if self._session.user_id is not None:
            out[USER_ID_KEY] = self._session.user_id
        if self._session.role is not None:
            out[ROLE_KEY] = self._session.role
        return out


__all__ = (
    "TOKEN_KEY",
    "USER_ID_KEY",
    "ROLE_KEY",
    "decode_claims",
    "Session",
    "ANONYMOUS",
    "SessionStore",
)
