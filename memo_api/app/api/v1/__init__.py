"""
Version 1 of the Memo Board API, mounted under ``/api/v1``.

Breaking changes to routes or response shapes belong in a new version
subpackage so existing clients keep working.
"""
