"""
API package containing versioned routes.

Each version lives in its own subpackage (currently only ``v1``) which
exposes a single ``router`` bundling the account and memo endpoints.
"""
