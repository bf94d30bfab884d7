"""
Linear Repository - cached Linear projects, issues and comment interactions.

Rows are keyed by Linear's own IDs so webhook deliveries can be replayed
safely: every write is an update-or-insert on the Linear ID.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from weave.shared.constants import (
    INTERACTIONS_TABLE,
    LINEAR_ISSUES_TABLE,
    LINEAR_PROJECTS_TABLE,
)

logger = logging.getLogger("Weave.Database.Linear")


class LinearRepository:
    """Repository for the Linear cache tables."""

    def __init__(self, client):
        """Initialize with Supabase client."""
        self.client = client

    def _find_one(self, table: str, column: str, value: str) -> Optional[Dict]:
        result = (
            self.client.table(table)
            .select("*")
            .eq(column, value)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def _upsert(self, table: str, key_column: str, record: Dict) -> Dict:
        """Update the row matching record[key_column] or insert a new one."""
        now = datetime.now(timezone.utc).isoformat()
        payload = {**record, "updated_at": now, "last_synced_at": now}

        existing = self._find_one(table, key_column, record[key_column])
        if existing:
            result = (
                self.client.table(table)
                .update(payload)
                .eq("id", existing["id"])
                .execute()
            )
            return result.data[0] if result.data else {**existing, **payload}

        payload.setdefault("created_at", now)
        result = self.client.table(table).insert(payload).execute()
        return result.data[0]

    # =========================================================================
    # PROJECTS
    # =========================================================================

    def find_project(self, linear_project_id: str) -> Optional[Dict]:
        return self._find_one(LINEAR_PROJECTS_TABLE, "linear_project_id", linear_project_id)

    def upsert_project(self, record: Dict) -> Dict:
        return self._upsert(LINEAR_PROJECTS_TABLE, "linear_project_id", record)

    def delete_project(self, linear_project_id: str) -> None:
        (
            self.client.table(LINEAR_PROJECTS_TABLE)
            .delete()
            .eq("linear_project_id", linear_project_id)
            .execute()
        )

    # =========================================================================
    # ISSUES
    # =========================================================================

    def find_issue(self, linear_issue_id: str) -> Optional[Dict]:
        return self._find_one(LINEAR_ISSUES_TABLE, "linear_issue_id", linear_issue_id)

    def find_issue_for_user(self, user_id: str, issue_ref: str) -> Optional[Dict]:
        """Find one of the user's cached issues by Linear ID or identifier (e.g. ENG-123)."""
        for column in ("linear_issue_id", "identifier"):
            result = (
                self.client.table(LINEAR_ISSUES_TABLE)
                .select("*")
                .eq("user_id", user_id)
                .eq(column, issue_ref)
                .limit(1)
                .execute()
            )
            if result.data:
                return result.data[0]
        return None

    def upsert_issue(self, record: Dict) -> Dict:
        return self._upsert(LINEAR_ISSUES_TABLE, "linear_issue_id", record)

    def delete_issue(self, linear_issue_id: str) -> None:
        (
            self.client.table(LINEAR_ISSUES_TABLE)
            .delete()
            .eq("linear_issue_id", linear_issue_id)
            .execute()
        )

    # =========================================================================
    # INTERACTIONS (comments)
    # =========================================================================

    def upsert_interaction(self, record: Dict) -> Dict:
        return self._upsert(INTERACTIONS_TABLE, "source_id", record)

    def delete_interaction(self, source_id: str) -> None:
        (
            self.client.table(INTERACTIONS_TABLE)
            .delete()
            .eq("source_id", source_id)
            .execute()
        )
