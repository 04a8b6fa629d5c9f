"""
Pydantic schemas for memos.

A memo is a short text written by one account.  ``starred`` lists the
usernames that currently star the memo, in the order the stars were
given; a username never appears twice.  ``edited_at`` stays empty until
the writer changes the contents for the first time.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ListType(str, Enum):
    """Direction of a feed page relative to the cursor memo."""

    OLD = "old"
    NEW = "new"


class MemoWrite(BaseModel):
    """Body of memo creation and edit.

    ``contents`` is typed ``Any`` so that ``MemoService`` can report a
    non-string value with the endpoint's own error code.
    """

    contents: Any = Field(None, examples=["hello"])

    @classmethod
    def from_body(cls, body: Any) -> "MemoWrite":
        """Build from a raw JSON body; a missing or non-object body is empty."""
        return cls.model_validate(body if isinstance(body, dict) else {})


class MemoRead(BaseModel):
    """Schema for reading a memo from the API."""

    id: int
    writer: str
    contents: str
    starred: List[str] = Field(default_factory=list)
    created_at: str
    edited_at: Optional[str] = None
    is_edited: bool = False


class MemoEditResponse(BaseModel):
    success: bool = True
    memo: MemoRead


class StarResponse(BaseModel):
    """Result of a star toggle.

    ``has_starred`` is true when this call added the star and false
    when it removed it.
    """

    success: bool = True
    has_starred: bool
    memo: MemoRead
