"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers (accounts and memos) under a
unified prefix.  When new domains are introduced, include their routers
here.
"""

from fastapi import APIRouter

from .endpoints import account, memo

router = APIRouter()

router.include_router(account.router, prefix="/account", tags=["account"])
router.include_router(memo.router, prefix="/memo", tags=["memo"])
