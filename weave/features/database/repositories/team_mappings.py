"""
Team Mappings Repository - Linear team to internal project bindings.

In an agency setup each Linear team is a client; its mapping points at the
internal project (tenant) that receives the team's issues and comments.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from weave.shared.constants import LINEAR_TEAM_MAPPINGS_TABLE

logger = logging.getLogger("Weave.Database.TeamMappings")


class TeamMappingsRepository:
    """Repository for Linear team mappings."""

    def __init__(self, client):
        """Initialize with Supabase client."""
        self.client = client

    def list_for_user(self, user_id: str) -> List[Dict]:
        result = (
            self.client.table(LINEAR_TEAM_MAPPINGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("linear_team_name")
            .execute()
        )
        return result.data or []

    def get(self, user_id: str, linear_team_id: str) -> Optional[Dict]:
        result = (
            self.client.table(LINEAR_TEAM_MAPPINGS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .eq("linear_team_id", linear_team_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def find_by_team(self, linear_team_id: str) -> Optional[Dict]:
        """Find the mapping for a team regardless of owner (webhooks carry no user)."""
        result = (
            self.client.table(LINEAR_TEAM_MAPPINGS_TABLE)
            .select("*")
            .eq("linear_team_id", linear_team_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def create(self, record: Dict) -> Dict:
        now = datetime.now(timezone.utc).isoformat()
        payload = {
            "auto_created": True,
            "sync_enabled": True,
            "created_at": now,
            "updated_at": now,
            **record,
        }
        result = self.client.table(LINEAR_TEAM_MAPPINGS_TABLE).insert(payload).execute()
        logger.info(f"Created team mapping for {payload.get('linear_team_name')}")
        return result.data[0]

    def update(self, mapping_id: str, updates: Dict) -> Optional[Dict]:
        payload = {**updates, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = (
            self.client.table(LINEAR_TEAM_MAPPINGS_TABLE)
            .update(payload)
            .eq("id", mapping_id)
            .execute()
        )
        return result.data[0] if result.data else None

    def touch_sync(self, mapping_id: str) -> None:
        """Record that the mapping just received data."""
        self.update(mapping_id, {"last_sync_at": datetime.now(timezone.utc).isoformat()})
