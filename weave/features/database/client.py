"""
Database Client - Unified Access to All Data Repositories

Provides organized access to data through domain-specific repositories.
This is a thin wrapper that delegates to focused repository classes.
"""

import logging
from functools import lru_cache

from weave.features.database.repositories.focus_sessions import FocusSessionsRepository
from weave.features.database.repositories.linear import LinearRepository
from weave.features.database.repositories.memories import MemoriesRepository
from weave.features.database.repositories.team_mappings import TeamMappingsRepository
from weave.features.database.repositories.users import UsersRepository

logger = logging.getLogger("Weave.Database")


class DatabaseClient:
    """
    Unified database client providing access to all repositories.

    Usage:
        db = get_database_client()
        mode = db.users.get_memory_mode(user_id)
        existing = db.memories.find_by_hash(user_id, content_hash)
    """

    def __init__(self, client=None):
        """
        Initialize database client with all repositories.

        Args:
            client: Supabase client; defaults to the shared one from weave.core.database
        """
        if client is None:
            from weave.core.database import get_supabase
            client = get_supabase()
        self._client = client

        self.users = UsersRepository(self._client)
        self.memories = MemoriesRepository(self._client)
        self.focus_sessions = FocusSessionsRepository(self._client)
        self.team_mappings = TeamMappingsRepository(self._client)
        self.linear = LinearRepository(self._client)

        logger.info("Database client initialized with all repositories")

    @property
    def client(self):
        """Direct access to Supabase client for advanced queries."""
        return self._client

    def table(self, name: str):
        """Direct table access for one-off queries."""
        return self._client.table(name)


@lru_cache(maxsize=1)
def get_database_client() -> DatabaseClient:
    """Get the singleton database client."""
    return DatabaseClient()
