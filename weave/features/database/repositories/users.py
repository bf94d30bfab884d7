"""
Users Repository - per-tenant settings stored on the user row.

Only the memory mode lives here; account management is handled elsewhere.
"""

import logging
from typing import Optional

from weave.shared.constants import USERS_TABLE

logger = logging.getLogger("Weave.Database.Users")


class UsersRepository:
    """Repository for user settings."""

    def __init__(self, client):
        """Initialize with Supabase client."""
        self.client = client

    def get_memory_mode(self, user_id: str) -> Optional[str]:
        """Return the stored memory mode, or None if the user row is missing."""
        result = (
            self.client.table(USERS_TABLE)
            .select("id, memory_mode")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return result.data[0].get("memory_mode")

    def set_memory_mode(self, user_id: str, mode: str) -> bool:
        """
        Persist the memory mode.

        Returns:
            True if a user row was updated
        """
        result = (
            self.client.table(USERS_TABLE)
            .update({"memory_mode": mode})
            .eq("id", user_id)
            .execute()
        )
        updated = bool(result.data)
        if not updated:
            logger.warning(f"No user row for {user_id}; memory mode not persisted")
        return updated
