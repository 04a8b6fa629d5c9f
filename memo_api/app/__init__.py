"""
Application package initializer.

The project is split into a few small pieces: ``core`` holds settings,
logging, storage and security helpers, ``schemas`` the request and
response models, ``services`` the business rules for accounts, sessions
and memos, and ``api`` the versioned HTTP routers that expose them.
"""

from .main import app  # noqa: F401
