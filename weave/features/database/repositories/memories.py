"""
Memories Repository - relational side of the memory engine.

Each memory has a row here (full content, tier, privacy, scoring fields) and
a vector in Pinecone referenced by pinecone_id. Deduplication and access
tracking are keyed on (user_id, content_hash).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from weave.shared.constants import MEMORIES_TABLE

logger = logging.getLogger("Weave.Database.Memories")

# Columns needed to compute per-user statistics
STATS_COLUMNS = "id, memory_type, privacy_level, importance, strength, is_permanent"

INCREMENT_ACCESS_FUNCTION = "increment_memory_access"


class MemoriesRepository:
    """Repository for memory rows."""

    def __init__(self, client):
        """Initialize with Supabase client."""
        self.client = client

    def find_by_hash(self, user_id: str, content_hash: str) -> Optional[Dict]:
        """Find an existing memory of this user with identical content."""
        result = (
            self.client.table(MEMORIES_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("content_hash", content_hash)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def get(self, user_id: str, memory_id: str) -> Optional[Dict]:
        """Get a memory by ID, scoped to its owner."""
        result = (
            self.client.table(MEMORIES_TABLE)
            .select("*")
            .eq("id", memory_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def get_by_pinecone_id(self, user_id: str, pinecone_id: str) -> Optional[Dict]:
        """Get a memory by the ID of its vector, scoped to its owner."""
        result = (
            self.client.table(MEMORIES_TABLE)
            .select("*")
            .eq("pinecone_id", pinecone_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def create(self, record: Dict) -> Dict:
        """Insert a memory row and return it."""
        now = datetime.now(timezone.utc).isoformat()
        payload = {
            "access_count": 0,
            "created_at": now,
            "updated_at": now,
            **record,
        }
        result = self.client.table(MEMORIES_TABLE).insert(payload).execute()
        return result.data[0]

    def list_for_user(
        self,
        user_id: str,
        limit: int = 50,
        memory_type: Optional[str] = None,
        privacy_level: Optional[str] = None,
    ) -> List[Dict]:
        """List a user's memories, newest first."""
        query = (
            self.client.table(MEMORIES_TABLE)
            .select("*")
            .eq("user_id", user_id)
        )
        if memory_type:
            query = query.eq("memory_type", memory_type)
        if privacy_level:
            query = query.eq("privacy_level", privacy_level)

        result = query.order("created_at", desc=True).limit(limit).execute()
        return result.data or []

    def list_for_stats(self, user_id: str) -> List[Dict]:
        """All of a user's memories, restricted to the statistics columns."""
        result = (
            self.client.table(MEMORIES_TABLE)
            .select(STATS_COLUMNS)
            .eq("user_id", user_id)
            .execute()
        )
        return result.data or []

    def delete(self, memory_id: str) -> None:
        self.client.table(MEMORIES_TABLE).delete().eq("id", memory_id).execute()

    def record_access(self, user_id: str, content_hashes: List[str]) -> int:
        """
        Bump access_count and last_accessed_at for recalled memories.

        Runs as one UPDATE inside Postgres (see
        sql/increment_memory_access.sql), so concurrent searches
        hitting the same memory each count.

        Returns:
            Number of rows updated
        """
        if not content_hashes:
            return 0

        result = self.client.rpc(INCREMENT_ACCESS_FUNCTION, {
            "p_user_id": user_id,
            "p_content_hashes": sorted(set(content_hashes)),
        }).execute()
        return result.data or 0
