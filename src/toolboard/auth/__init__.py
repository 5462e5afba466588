"""Authentication.

Two halves:
1. Identity bridge: a Google ID token is verified against Google's keys
   and exchanged for a local user row plus a session token.
2. Session guard: every /api/user route requires that session token as
   a Bearer header and resolves it to the current user id.
"""
