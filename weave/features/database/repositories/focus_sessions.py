"""
Focus Sessions Repository - time-boxed category boosts.

boost_factor is stored as an integer percentage (200 = 2.0x).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from weave.shared.constants import FOCUS_SESSIONS_TABLE

logger = logging.getLogger("Weave.Database.FocusSessions")


class FocusSessionsRepository:
    """Repository for focus sessions."""

    def __init__(self, client):
        """Initialize with Supabase client."""
        self.client = client

    def deactivate_all(self, user_id: str) -> int:
        """Mark every active session of the user inactive."""
        result = (
            self.client.table(FOCUS_SESSIONS_TABLE)
            .update({"is_active": False})
            .eq("user_id", user_id)
            .eq("is_active", True)
            .execute()
        )
        return len(result.data or [])

    def create(self, record: Dict) -> Dict:
        payload = {
            "is_active": True,
            "memories_accessed": 0,
            "started_at": datetime.now(timezone.utc).isoformat(),
            **record,
        }
        result = self.client.table(FOCUS_SESSIONS_TABLE).insert(payload).execute()
        return result.data[0]

    def get_active(self, user_id: str, now: Optional[datetime] = None) -> Optional[Dict]:
        """Most recent active session that has not expired yet."""
        now = now or datetime.now(timezone.utc)
        result = (
            self.client.table(FOCUS_SESSIONS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("is_active", True)
            .gte("expires_at", now.isoformat())
            .order("started_at", desc=True)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None
