"""Memo Board API client.

A thin wrapper around the Memo Board HTTP API built on ``requests``.
The client keeps one ``requests.Session`` so the session cookie issued
by :meth:`MemoBoardAPI.signin` is sent with every later call.

Every public method returns a tuple ``(data, error)``:

* on success ``data`` is the decoded JSON body and ``error`` is ``None``;
* on failure ``data`` is ``None`` (or an empty list for feeds) and
  ``error`` is a dictionary with ``status_code``, ``error`` and
  ``code``.  ``error``/``code`` are the values the server reported, or
  the transport error message and ``None`` when no response arrived.

Example::

    api = MemoBoardAPI(base_url="http://localhost:8000")
    api.signup("alice", "pass1")
    api.signin("alice", "pass1")
    api.write_memo("hello")
    memos, error = api.list_memos()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class MemoBoardAPI:
    """Client for the Memo Board API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_prefix: str = "/api/v1",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:8000``.
            api_prefix: Path the versioned API is mounted under.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Result:
        """Perform an HTTP request to the API.

        Args:
            method: HTTP method (``GET``, ``POST``, ``PUT``, ``DELETE``).
            path: Path relative to the API prefix (e.g. ``/memo/``).
            json_body: JSON body to send with the request.
        Returns:
            A tuple ``(data, error)`` as described in the module docstring.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            error: Dict[str, Any] = {"status_code": status, "error": str(exc), "code": None}
            if exc.response is not None:
                try:
                    body = exc.response.json()
                except ValueError:
                    body = None
                if isinstance(body, dict):
                    error["error"] = body.get("error") or body.get("detail") or str(body)
                    error["code"] = body.get("code")
            logger.error("API request failed (%s): %s", status, error["error"])
            return None, error
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "error": str(exc), "code": None}

    # ------------------------------------------------------------------
    # Account operations
    # ------------------------------------------------------------------
    def signup(self, username: str, password: str) -> Result:
        """Register a new account.  Does not sign in."""
        return self._request("POST", "/account/signup", json_body={"username": username, "password": password})

    def signin(self, username: str, password: str) -> Result:
        """Sign in; the session cookie is stored on :attr:`session`."""
        return self._request("POST", "/account/signin", json_body={"username": username, "password": password})

    def get_info(self) -> Result:
        """Return ``{"info": {"id", "username"}}`` for the signed-in account."""
        return self._request("GET", "/account/getinfo")

    def logout(self) -> Result:
        data, error = self._request("POST", "/account/logout")
        if not error:
            self.session.cookies.clear()
        return data, error

    def search_users(self, prefix: str) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Return usernames starting with ``prefix``."""
        if not prefix:
            return [], None
        data, error = self._request("GET", f"/account/search/{quote(prefix, safe='')}")
        if error:
            return [], error
        return data or [], None

    # ------------------------------------------------------------------
    # Memo operations
    # ------------------------------------------------------------------
    def list_memos(
        self,
        username: Optional[str] = None,
        list_type: Optional[str] = None,
        memo_id: Any = None,
    ) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Fetch a feed page.

        Args:
            username: Restrict the feed to one writer.
            list_type: ``"old"`` or ``"new"`` to page relative to ``memo_id``.
            memo_id: Cursor memo id; required with ``list_type``.
        Returns:
            A tuple ``(memos, error)``; ``memos`` is empty on failure.
        """
        path = "/memo"
        if username:
            path += f"/{quote(username, safe='')}"
        if list_type is not None:
            path += f"/{list_type}/{memo_id}"
        elif not username:
            path += "/"
        data, error = self._request("GET", path)
        if error:
            return [], error
        return data or [], None

    def write_memo(self, contents: str) -> Result:
        return self._request("POST", "/memo/", json_body={"contents": contents})

    def edit_memo(self, memo_id: Any, contents: str) -> Result:
        """Replace the contents of a memo; ``data["memo"]`` holds the result."""
        return self._request("PUT", f"/memo/{memo_id}", json_body={"contents": contents})

    def delete_memo(self, memo_id: Any) -> Result:
        return self._request("DELETE", f"/memo/{memo_id}")

    def star_memo(self, memo_id: Any) -> Result:
        """Toggle the star; ``data["has_starred"]`` tells which way it went."""
        return self._request("POST", f"/memo/star/{memo_id}")
