"""
Database Feature Module - Organized Data Access Layer

Provides access to the Supabase tables used by the memory engine and the
Linear integration.

Usage:
    from weave.features.database import get_database_client

    db = get_database_client()
    mode = db.users.get_memory_mode(user_id)
    session = db.focus_sessions.get_active(user_id)
"""

from weave.features.database.client import DatabaseClient, get_database_client

__all__ = [
    "DatabaseClient",
    "get_database_client",
]
