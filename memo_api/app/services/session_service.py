"""
Server-side session store.

A session maps an opaque token to the identity of the account that
signed in.  Records live in the ``sessions`` table and expire after
``settings.session_expire_minutes``; expired records are removed the
next time their token is looked up.
"""

import logging
import secrets
import time
from typing import Optional

from memo_api.app.core.config import settings
from memo_api.app.core.db import get_cursor
from memo_api.app.schemas.account import LoginInfo


logger = logging.getLogger(__name__)


def new_session_token() -> str:
    """Return a fresh, unguessable session token."""
    return secrets.token_urlsafe(32)


class SessionService:
    """Create, resolve and destroy sessions."""

    @classmethod
    async def create(cls, account_id: int, username: str) -> str:
        """Store a new session for the account and return its token."""
        token = new_session_token()
        expires_at = time.time() + settings.session_expire_minutes * 60
        with get_cursor() as cursor:
            cursor.execute(
                "INSERT INTO sessions (token, account_id, username, expires_at) VALUES (?, ?, ?, ?)",
                (token, account_id, username, expires_at),
            )
        logger.debug("Session opened for %s", username)
        return token

    @classmethod
    async def get(cls, token: str) -> Optional[LoginInfo]:
        """Return the identity behind ``token`` or ``None``."""
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT account_id, username, expires_at FROM sessions WHERE token = ?",
                (token,),
            ).fetchone()
            if not row:
                return None
            if row["expires_at"] < time.time():
                cursor.execute("DELETE FROM sessions WHERE token = ?", (token,))
                return None
            return LoginInfo(id=row["account_id"], username=row["username"])

    @classmethod
    async def destroy(cls, token: Optional[str]) -> None:
        """Delete the session record.  Unknown or missing tokens are a no-op."""
        if not token:
            return
        with get_cursor() as cursor:
            cursor.execute("DELETE FROM sessions WHERE token = ?", (token,))
