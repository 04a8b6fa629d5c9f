"""
Top‑level package for the Memo Board API.

This file makes ``memo_api`` a Python package so that modules within
``app`` can be imported using fully qualified names like
``memo_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
