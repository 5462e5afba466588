"""Toolboard — per-user tool dashboard backend.

Google Sign-In, server-issued session tokens, and CRUD over each
user's bookmarked tools and catalog overrides.
"""

__version__ = "0.1.0"
