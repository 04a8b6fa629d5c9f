"""
Pydantic schema definitions for API payloads.

Accounts and memos each define their own request and response models.
Schemas are separated from the storage layout to decouple the API
representation from persistence.
"""
