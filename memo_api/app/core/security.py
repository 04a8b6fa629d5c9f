"""
Security helpers for password hashing and session resolution.

Passwords are hashed with PBKDF2‑HMAC‑SHA256 using a per-account random
salt.  The salt and the digest are stored in separate columns as hex
strings.  Sessions are server side: the client only holds an opaque
random token in a cookie, and ``get_session`` turns that token into a
``SessionContext`` which is passed explicitly to every service call
that needs to know who is asking.
"""

import hashlib
import hmac
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Depends
from fastapi.security import APIKeyCookie

from .config import settings
from ..schemas.account import LoginInfo
from ..services.session_service import SessionService


def hash_password(password: str, salt: Optional[str] = None) -> Tuple[str, str]:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated when none is given.  Returns the
    pair ``(salt_hex, hash_hex)``; pass the stored salt back in to
    recompute the digest for a login attempt.

    Parameters
    ----------
    password : str
        The plain text password to hash.
    salt : Optional[str]
        Hex encoded salt of an existing account.

    Returns
    -------
    tuple
        Salt and hash, both hex encoded.
    """
    salt_bytes = bytes.fromhex(salt) if salt is not None else os.urandom(16)
    dk = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt_bytes, settings.password_iterations
    )
    return salt_bytes.hex(), dk.hex()


def verify_password(plain_password: str, salt: str, hashed_password: str) -> bool:
    """Check a plain password against a stored salt and hash.

    The digest is recomputed with the stored salt and compared in
    constant time.
    """
    _, candidate = hash_password(plain_password, salt)
    return hmac.compare_digest(candidate, hashed_password)


@dataclass
class SessionContext:
    """The caller's session as seen by a service.

    ``token`` is whatever the client presented (possibly stale or
    unknown); ``login_info`` is only set when the token maps to a live
    session record.
    """

    token: Optional[str] = None
    login_info: Optional[LoginInfo] = None

    @property
    def is_authenticated(self) -> bool:
        return self.login_info is not None

    @property
    def username(self) -> Optional[str]:
        return self.login_info.username if self.login_info else None


session_cookie = APIKeyCookie(name=settings.session_cookie_name, auto_error=False)


async def get_session(token: Optional[str] = Depends(session_cookie)) -> SessionContext:
    """Dependency that resolves the session cookie into a ``SessionContext``.

    Never rejects the request: an absent, unknown or expired token
    produces an anonymous context and each operation decides, in its
    own validation order, whether that is an error.
    """
    if not token:
        return SessionContext()
    login_info = await SessionService.get(token)
    return SessionContext(token=token, login_info=login_info)
