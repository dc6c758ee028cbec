"""
Session: explicit, injected identity.

    from medicart.session import SessionStore

    sessions = SessionStore()
    sessions.load({"accessToken": token, "userId": "7"})
"""

from __future__ import annotations

from medicart.session._session import (
    TOKEN_KEY,
    USER_ID_KEY,
    ROLE_KEY,
    decode_claims,
    Session,
    ANONYMOUS,
    SessionStore,
)

__all__ = (
    "TOKEN_KEY",
    "USER_ID_KEY",
    "ROLE_KEY",
    "decode_claims",
    "Session",
    "ANONYMOUS",
    "SessionStore",
)
