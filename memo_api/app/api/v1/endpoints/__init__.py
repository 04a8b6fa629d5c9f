"""
Endpoint modules for API v1: ``account`` (signup, signin, sessions,
username search) and ``memo`` (memo writes, stars and feeds).
"""
