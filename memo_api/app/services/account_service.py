"""
Business logic for accounts.

``AccountService`` registers accounts, checks credentials, hands out
sessions and searches usernames.  Every check raises a ``ServiceError``
carrying the numeric code documented for the endpoint; the checks run
in a fixed order so a client always receives the first applicable
error.
"""

import logging
import re
from typing import List

from memo_api.app.core.config import settings
from memo_api.app.core.db import get_cursor
from memo_api.app.core.errors import AuthError, ConflictError, ValidationError
from memo_api.app.core.security import SessionContext, hash_password, verify_password
from memo_api.app.schemas.account import AccountCredentials, LoginInfo, UsernameRead
from memo_api.app.services.session_service import SessionService


USERNAME_RE = re.compile(r"^[a-z0-9]+$")
MIN_PASSWORD_LENGTH = 4

logger = logging.getLogger(__name__)


def password_length(password: str) -> int:
    """Length in UTF-16 code units; a character outside the BMP counts twice."""
    return len(password.encode("utf-16-le", "surrogatepass")) // 2


class AccountService:
    """Service for account registration, sign in and lookup."""

    @classmethod
    async def register(cls, data: AccountCredentials) -> None:
        """Create a new account.

        Error codes:
            1: BAD USERNAME (not lowercase alphanumeric)
            2: BAD PASSWORD (not a string or shorter than four characters)
            3: USERNAME EXISTS

        No session is opened; the client signs in separately.
        """
        username = data.username
        password = data.password
        if not isinstance(username, str) or not USERNAME_RE.match(username):
            raise ValidationError("BAD USERNAME", 1)
        if not isinstance(password, str) or password_length(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("BAD PASSWORD", 2)

        with get_cursor() as cursor:
            exists = cursor.execute(
                "SELECT id FROM accounts WHERE username = ?", (username,)
            ).fetchone()
            if exists:
                raise ConflictError("USERNAME EXISTS", 3)
            salt, hashed = hash_password(password)
            cursor.execute(
                "INSERT INTO accounts (username, password, salt) VALUES (?, ?, ?)",
                (username, hashed, salt),
            )
        logger.info("Registered account %s", username)

    @classmethod
    async def authenticate(cls, data: AccountCredentials, session: SessionContext) -> str:
        """Check credentials and open a session.

        Error codes:
            1: PASSWORD IS NOT STRING
            2: THERE IS NO USER
            3: PASSWORD IS NOT CORRECT

        Returns the token of the new session.  A session the client
        already held is replaced.
        """
        if not isinstance(data.password, str):
            raise AuthError("PASSWORD IS NOT STRING", 1)
        if not isinstance(data.username, str):
            raise AuthError("THERE IS NO USER", 2)

        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT id, username, password, salt FROM accounts WHERE username = ?",
                (data.username,),
            ).fetchone()
        if not row:
            raise AuthError("THERE IS NO USER", 2)
        if not verify_password(data.password, row["salt"], row["password"]):
            logger.warning("Failed sign in for %s", row["username"])
            raise AuthError("PASSWORD IS NOT CORRECT", 3)

        await SessionService.destroy(session.token)
        token = await SessionService.create(row["id"], row["username"])
        logger.info("Account %s signed in", row["username"])
        return token

    @classmethod
    def current_identity(cls, session: SessionContext) -> LoginInfo:
        """Return the identity of the session.

        Error codes:
            1: THERE IS NO LOGIN DATA
        """
        if session.login_info is None:
            raise AuthError("THERE IS NO LOGIN DATA", 1)
        return session.login_info

    @classmethod
    async def logout(cls, session: SessionContext) -> None:
        """Destroy the session.  Storage failures propagate."""
        await SessionService.destroy(session.token)
        if session.username:
            logger.info("Account %s signed out", session.username)

    @classmethod
    async def search_usernames(cls, prefix: str) -> List[UsernameRead]:
        """Return up to ``settings.search_limit`` usernames starting with ``prefix``.

        The match is literal and case-sensitive; results are sorted
        ascending.  An empty prefix returns nothing without touching
        the database.
        """
        if not prefix:
            return []
        with get_cursor() as cursor:
            rows = cursor.execute(
                "SELECT username FROM accounts WHERE substr(username, 1, ?) = ? "
                "ORDER BY username ASC LIMIT ?",
                (len(prefix), prefix, settings.search_limit),
            ).fetchall()
        return [UsernameRead(username=row["username"]) for row in rows]
