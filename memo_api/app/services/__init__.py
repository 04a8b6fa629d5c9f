"""
Service layer abstraction.

Each service encapsulates the business rules for one domain (accounts,
sessions, memos).  API handlers only translate HTTP to service calls,
so the storage behind the services can change without touching them.
"""
