"""
Account endpoints for API v1.

Provide signup, signin, the current identity of a session, logout and a
username prefix search.  The session token is delivered and cleared
through an HTTP-only cookie.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Response

from memo_api.app.core.config import settings
from memo_api.app.core.security import SessionContext, get_session
from memo_api.app.schemas.account import (
    AccountCredentials,
    InfoResponse,
    SuccessResponse,
    UsernameRead,
)
from memo_api.app.services.account_service import AccountService


router = APIRouter()


@router.post("/signup", response_model=SuccessResponse)
async def signup(body: Any = Body(None)) -> SuccessResponse:
    """Register a new account.

    Error codes: 1 BAD USERNAME, 2 BAD PASSWORD, 3 USERNAME EXISTS.
    """
    await AccountService.register(AccountCredentials.from_body(body))
    return SuccessResponse()


@router.post("/signin", response_model=SuccessResponse)
async def signin(
    response: Response,
    body: Any = Body(None),
    session: SessionContext = Depends(get_session),
) -> SuccessResponse:
    """Check credentials and start a session.

    Error codes: 1 PASSWORD IS NOT STRING, 2 THERE IS NO USER,
    3 PASSWORD IS NOT CORRECT.
    """
    token = await AccountService.authenticate(AccountCredentials.from_body(body), session)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return SuccessResponse()


@router.get("/getinfo", response_model=InfoResponse)
async def get_info(session: SessionContext = Depends(get_session)) -> InfoResponse:
    """Return the identity of the current session (error code 1 without one)."""
    return InfoResponse(info=AccountService.current_identity(session))


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    session: SessionContext = Depends(get_session),
) -> SuccessResponse:
    """End the current session.  Always succeeds."""
    await AccountService.logout(session)
    response.delete_cookie(settings.session_cookie_name)
    return SuccessResponse()


@router.get("/search", response_model=List[UsernameRead])
async def search_empty() -> List[UsernameRead]:
    """An empty search never matches anything."""
    return []


@router.get("/search/{username}", response_model=List[UsernameRead])
async def search_usernames(username: str) -> List[UsernameRead]:
    """Find usernames starting with the given prefix."""
    return await AccountService.search_usernames(username)
