"""
Business logic for memos.

Memos are stored in the ``memos`` table and the stars given to them in
``memo_stars``.  Memo ids come from an AUTOINCREMENT column, so they
grow with creation time and never repeat; feeds are paged by using the
id of the last memo a client has seen as a cursor.  Pages are always
returned newest first, whichever direction the client is paging in.

Each operation validates its input in a fixed order and raises a
``ServiceError`` with the code documented for its endpoint.
"""

import logging
import re
import sqlite3
from typing import Dict, List, Optional

from memo_api.app.core.config import settings
from memo_api.app.core.db import get_cursor
from memo_api.app.core.errors import (
    AuthError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from memo_api.app.core.security import SessionContext
from memo_api.app.schemas.memo import ListType, MemoRead, MemoWrite


MEMO_ID_RE = re.compile(r"^[0-9]{1,19}$")
MAX_MEMO_ID = 2 ** 63 - 1

MEMO_COLUMNS = "id, writer, contents, created_at, edited_at, is_edited"

logger = logging.getLogger(__name__)


def is_valid_id(value: str) -> bool:
    """Return True if ``value`` can name a memo (a non-negative 64-bit integer)."""
    return bool(MEMO_ID_RE.match(value)) and int(value) <= MAX_MEMO_ID


def _not_logged_in(code: int) -> AuthError:
    # Memo routes answer a missing session with 403, unlike account routes.
    return AuthError("NOT LOGGED IN", code, status_code=403)


def _check_contents(contents) -> str:
    if not isinstance(contents, str):
        raise ValidationError("CONTENTS IS NOT STRING", 2)
    if contents == "":
        raise ValidationError("EMPTY CONTENTS", 3)
    return contents


class MemoService:
    """Service for writing, editing, starring and listing memos."""

    # ------------------------------------------------------------------
    # Storage helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _fetch_row(cursor: sqlite3.Cursor, memo_id: int) -> Optional[sqlite3.Row]:
        return cursor.execute(
            f"SELECT {MEMO_COLUMNS} FROM memos WHERE id = ?", (memo_id,)
        ).fetchone()

    @staticmethod
    def _stars_for(cursor: sqlite3.Cursor, memo_ids: List[int]) -> Dict[int, List[str]]:
        """Map each memo id to its stargazers in the order the stars were given."""
        stars: Dict[int, List[str]] = {memo_id: [] for memo_id in memo_ids}
        if not memo_ids:
            return stars
        placeholders = ", ".join("?" for _ in memo_ids)
        rows = cursor.execute(
            f"SELECT memo_id, username FROM memo_stars WHERE memo_id IN ({placeholders}) "
            "ORDER BY rowid ASC",
            tuple(memo_ids),
        ).fetchall()
        for row in rows:
            stars[row["memo_id"]].append(row["username"])
        return stars

    @staticmethod
    def _to_read(row: sqlite3.Row, starred: List[str]) -> MemoRead:
        return MemoRead(
            id=row["id"],
            writer=row["writer"],
            contents=row["contents"],
            starred=starred,
            created_at=row["created_at"],
            edited_at=row["edited_at"],
            is_edited=bool(row["is_edited"]),
        )

    @classmethod
    def _load(cls, cursor: sqlite3.Cursor, memo_id: int) -> MemoRead:
        row = cls._fetch_row(cursor, memo_id)
        return cls._to_read(row, cls._stars_for(cursor, [memo_id])[memo_id])

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    @classmethod
    async def create_memo(cls, data: MemoWrite, session: SessionContext) -> int:
        """Write a new memo as the session's account.

        Error codes:
            1: NOT LOGGED IN
            2: CONTENTS IS NOT STRING
            3: EMPTY CONTENTS

        Returns the id of the new memo.
        """
        if not session.is_authenticated:
            raise _not_logged_in(1)
        contents = _check_contents(data.contents)
        with get_cursor() as cursor:
            cursor.execute(
                "INSERT INTO memos (writer, contents) VALUES (?, ?)",
                (session.username, contents),
            )
            memo_id = cursor.lastrowid
        logger.info("User %s wrote memo %s", session.username, memo_id)
        return memo_id

    @classmethod
    async def edit_memo(cls, memo_id: str, data: MemoWrite, session: SessionContext) -> MemoRead:
        """Replace the contents of one of the session's own memos.

        Error codes:
            1: INVALID ID
            2: CONTENTS IS NOT STRING
            3: EMPTY CONTENTS
            4: NOT LOGGED IN
            5: NO RESOURCE
            6: PERMISSION FAILURE
        """
        if not is_valid_id(memo_id):
            raise ValidationError("INVALID ID", 1)
        contents = _check_contents(data.contents)
        if not session.is_authenticated:
            raise _not_logged_in(4)
        with get_cursor(immediate=True) as cursor:
            row = cls._fetch_row(cursor, int(memo_id))
            if not row:
                raise NotFoundError("NO RESOURCE", 5)
            if row["writer"] != session.username:
                raise PermissionDeniedError("PERMISSION FAILURE", 6)
            cursor.execute(
                "UPDATE memos SET contents = ?, edited_at = CURRENT_TIMESTAMP, is_edited = 1 "
                "WHERE id = ?",
                (contents, row["id"]),
            )
            memo = cls._load(cursor, row["id"])
        logger.info("User %s edited memo %s", session.username, memo.id)
        return memo

    @classmethod
    async def delete_memo(cls, memo_id: str, session: SessionContext) -> None:
        """Delete one of the session's own memos together with its stars.

        Error codes:
            1: INVALID ID
            2: NOT LOGGED IN
            3: NO RESOURCE
            4: PERMISSION FAILURE
        """
        if not is_valid_id(memo_id):
            raise ValidationError("INVALID ID", 1)
        if not session.is_authenticated:
            raise _not_logged_in(2)
        with get_cursor(immediate=True) as cursor:
            row = cls._fetch_row(cursor, int(memo_id))
            if not row:
                raise NotFoundError("NO RESOURCE", 3)
            if row["writer"] != session.username:
                raise PermissionDeniedError("PERMISSION FAILURE", 4)
            cursor.execute("DELETE FROM memos WHERE id = ?", (row["id"],))
        logger.info("User %s deleted memo %s", session.username, memo_id)

    @classmethod
    async def toggle_star(cls, memo_id: str, session: SessionContext) -> tuple[bool, MemoRead]:
        """Star the memo, or take the star back if the session already gave one.

        Any signed-in account may star any memo, its own included.

        Error codes:
            1: INVALID ID
            2: NOT LOGGED IN
            3: NO RESOURCE

        Returns ``(has_starred, memo)`` where ``has_starred`` is true if
        this call added the star.  The existence check and the
        delete-or-insert share one write transaction, so concurrent
        toggles are applied one after the other and a memo cannot vanish
        between the check and the insert.
        """
        if not is_valid_id(memo_id):
            raise ValidationError("INVALID ID", 1)
        if not session.is_authenticated:
            raise _not_logged_in(2)
        with get_cursor(immediate=True) as cursor:
            row = cls._fetch_row(cursor, int(memo_id))
            if not row:
                raise NotFoundError("NO RESOURCE", 3)
            cursor.execute(
                "DELETE FROM memo_stars WHERE memo_id = ? AND username = ?",
                (row["id"], session.username),
            )
            has_starred = cursor.rowcount == 0
            if has_starred:
                cursor.execute(
                    "INSERT INTO memo_stars (memo_id, username) VALUES (?, ?)",
                    (row["id"], session.username),
                )
            memo = cls._load(cursor, row["id"])
        logger.info(
            "User %s %s memo %s",
            session.username,
            "starred" if has_starred else "unstarred",
            memo.id,
        )
        return has_starred, memo

    # ------------------------------------------------------------------
    # Feeds
    # ------------------------------------------------------------------
    @classmethod
    async def list_memos(
        cls,
        writer: Optional[str] = None,
        list_type: Optional[str] = None,
        memo_id: Optional[str] = None,
    ) -> List[MemoRead]:
        """Return one page of the feed, newest first.

        Without ``list_type`` the newest ``settings.page_size`` memos are
        returned.  With ``list_type`` ``old`` the page holds memos older
        than ``memo_id``; with ``new`` it holds memos newer than it.
        ``writer`` restricts the feed to one account.

        Error codes (paged variants only):
            1: INVALID LISTTYPE
            2: INVALID ID
        """
        params: list = []
        where_clauses = []
        if writer is not None:
            where_clauses.append("writer = ?")
            params.append(writer)
        if list_type is not None:
            if list_type not in {ListType.OLD.value, ListType.NEW.value}:
                raise ValidationError("INVALID LISTTYPE", 1)
            if memo_id is None or not is_valid_id(memo_id):
                raise ValidationError("INVALID ID", 2)
            comparison = "<" if list_type == ListType.OLD.value else ">"
            where_clauses.append(f"id {comparison} ?")
            params.append(int(memo_id))

        query = f"SELECT {MEMO_COLUMNS} FROM memos"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY id DESC LIMIT ?"
        params.append(settings.page_size)

        with get_cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
            stars = cls._stars_for(cursor, [row["id"] for row in rows])
        return [cls._to_read(row, stars[row["id"]]) for row in rows]
