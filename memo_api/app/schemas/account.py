"""
Pydantic models for account data.

``AccountCredentials`` is the body of both signup and signin.  Its
fields are deliberately typed ``Any`` and the endpoints accept any JSON
body, building the model with ``from_body``: a missing body or a
non-string password is not a generic 422 but a documented, numbered
error of the endpoint, so the type checks happen in ``AccountService``
in the order each endpoint promises.  Password hashes and salts never
appear in any response model.
"""

from typing import Any

from pydantic import BaseModel, Field


class AccountCredentials(BaseModel):
    """Body of ``signup`` and ``signin``."""

    username: Any = Field(None, examples=["alice"])
    password: Any = Field(None, examples=["pass1"])

    @classmethod
    def from_body(cls, body: Any) -> "AccountCredentials":
        """Build from a raw JSON body; a missing or non-object body is empty."""
        return cls.model_validate(body if isinstance(body, dict) else {})


class LoginInfo(BaseModel):
    """Identity stored in a session record."""

    id: int
    username: str


class InfoResponse(BaseModel):
    info: LoginInfo


class UsernameRead(BaseModel):
    """One hit of the username search."""

    username: str


class SuccessResponse(BaseModel):
    success: bool = True
