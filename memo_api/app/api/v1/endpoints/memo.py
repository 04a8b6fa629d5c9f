"""
Memo endpoints for API v1.

Writing, editing, deleting and starring require a session; reading the
feeds does not.  Memo ids arrive as plain path strings and are checked
by ``MemoService`` so that a malformed id gets the endpoint's own
``INVALID ID`` code instead of a generic validation response.  Bodies
are taken as raw JSON for the same reason.

Route order matters: the two-segment ``/{list_type}/{memo_id}`` page of
the global feed is declared before the one-segment ``/{username}``
feed, and ``/star/{memo_id}`` is only reachable with POST.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends

from memo_api.app.core.security import SessionContext, get_session
from memo_api.app.schemas.account import SuccessResponse
from memo_api.app.schemas.memo import MemoEditResponse, MemoRead, MemoWrite, StarResponse
from memo_api.app.services.memo_service import MemoService


router = APIRouter()


@router.post("/", response_model=SuccessResponse)
async def write_memo(
    body: Any = Body(None),
    session: SessionContext = Depends(get_session),
) -> SuccessResponse:
    """Write a memo.

    Error codes: 1 NOT LOGGED IN, 2 CONTENTS IS NOT STRING, 3 EMPTY CONTENTS.
    """
    await MemoService.create_memo(MemoWrite.from_body(body), session)
    return SuccessResponse()


@router.get("/", response_model=List[MemoRead])
async def list_memos() -> List[MemoRead]:
    """Return the newest memos of all writers."""
    return await MemoService.list_memos()


@router.put("/{memo_id}", response_model=MemoEditResponse)
async def edit_memo(
    memo_id: str,
    body: Any = Body(None),
    session: SessionContext = Depends(get_session),
) -> MemoEditResponse:
    """Edit one of your memos.

    Error codes: 1 INVALID ID, 2 CONTENTS IS NOT STRING, 3 EMPTY CONTENTS,
    4 NOT LOGGED IN, 5 NO RESOURCE, 6 PERMISSION FAILURE.
    """
    memo = await MemoService.edit_memo(memo_id, MemoWrite.from_body(body), session)
    return MemoEditResponse(memo=memo)


@router.delete("/{memo_id}", response_model=SuccessResponse)
async def delete_memo(
    memo_id: str,
    session: SessionContext = Depends(get_session),
) -> SuccessResponse:
    """Delete one of your memos.

    Error codes: 1 INVALID ID, 2 NOT LOGGED IN, 3 NO RESOURCE,
    4 PERMISSION FAILURE.
    """
    await MemoService.delete_memo(memo_id, session)
    return SuccessResponse()


@router.post("/star/{memo_id}", response_model=StarResponse)
async def star_memo(
    memo_id: str,
    session: SessionContext = Depends(get_session),
) -> StarResponse:
    """Toggle your star on a memo.

    Error codes: 1 INVALID ID, 2 NOT LOGGED IN, 3 NO RESOURCE.
    """
    has_starred, memo = await MemoService.toggle_star(memo_id, session)
    return StarResponse(has_starred=has_starred, memo=memo)


@router.get("/{list_type}/{memo_id}", response_model=List[MemoRead])
async def list_memos_page(list_type: str, memo_id: str) -> List[MemoRead]:
    """Return the memos older (``old``) or newer (``new``) than ``memo_id``.

    Error codes: 1 INVALID LISTTYPE, 2 INVALID ID.
    """
    return await MemoService.list_memos(list_type=list_type, memo_id=memo_id)


@router.get("/{username}", response_model=List[MemoRead])
async def list_user_memos(username: str) -> List[MemoRead]:
    """Return the newest memos of one writer."""
    return await MemoService.list_memos(writer=username)


@router.get("/{username}/{list_type}/{memo_id}", response_model=List[MemoRead])
async def list_user_memos_page(username: str, list_type: str, memo_id: str) -> List[MemoRead]:
    """Return a page of one writer's memos relative to ``memo_id``.

    Error codes: 1 INVALID LISTTYPE, 2 INVALID ID.
    """
    return await MemoService.list_memos(writer=username, list_type=list_type, memo_id=memo_id)
