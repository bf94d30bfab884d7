"""
Linear pull sync - fetch teams, projects and issues into the cache tables.

Webhooks keep the cache current; a pull sync fills it on first connect and
repairs it after missed deliveries. Each team is synced independently: a
Linear failure for one team is recorded in the result and the next team is
still synced.
"""

import logging
from typing import Any, Dict, List, Optional

from weave.features.linear.records import issue_record, project_record
from weave.features.linear.team_mappings import resolve_project_for_team, sync_team_mappings
from weave.shared.errors import LinearAPIError

logger = logging.getLogger("Weave.Linear.Sync")


def _empty_stats() -> Dict[str, int]:
    return {
        "teams_created": 0,
        "teams_existing": 0,
        "projects_created": 0,
        "projects_updated": 0,
        "issues_created": 0,
        "issues_updated": 0,
    }


async def _sync_team(db, linear_client, mapping: Dict[str, Any], stats: Dict[str, int]) -> None:
    team_id = mapping["linear_team_id"]
    project_id = await resolve_project_for_team(db, team_id)

    for project in await linear_client.get_projects(team_id):
        stats["projects_updated" if db.linear.find_project(project["id"]) else "projects_created"] += 1
        row = db.linear.upsert_project(project_record(project, mapping, project_id))

        for issue in await linear_client.get_issues(project["id"]):
            stats["issues_updated" if db.linear.find_issue(issue["id"]) else "issues_created"] += 1
            db.linear.upsert_issue(issue_record(issue, mapping, project_id, row["id"]))

    db.team_mappings.touch_sync(mapping["id"])


async def sync_linear_data(
    db,
    linear_client,
    user_id: str,
    team_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Pull a user's Linear teams, projects and issues into the cache.

    Args:
        team_id: Sync only this Linear team; otherwise every team with
            sync enabled

    Returns:
        {"success", "stats", "errors"}; success is False when any team failed

    Raises:
        LinearAPIError: The team list itself could not be fetched
    """
    stats = _empty_stats()
    errors: List[str] = []

    teams = await sync_team_mappings(db, linear_client, user_id)
    stats["teams_created"] = len(teams["created"])
    stats["teams_existing"] = teams["existing"]

    mappings = [
        m for m in db.team_mappings.list_for_user(user_id)
        if (m["linear_team_id"] == team_id if team_id else m.get("sync_enabled", True))
    ]

    for mapping in mappings:
        try:
            await _sync_team(db, linear_client, mapping, stats)
        except LinearAPIError as e:
            logger.error(f"Linear sync failed for team {mapping.get('linear_team_name')}: {e}")
            errors.append(f"Team {mapping.get('linear_team_name')}: {e}")

    logger.info(f"Linear sync for {user_id} finished: {stats}", extra={"user_id": user_id})
    return {"success": not errors, "stats": stats, "errors": errors}


async def get_sync_status(db, user_id: str) -> Dict[str, Any]:
    """Last sync time per team mapping."""
    mappings = db.team_mappings.list_for_user(user_id)
    synced = [m["last_sync_at"] for m in mappings if m.get("last_sync_at")]
    return {
        "connected": bool(mappings),
        "last_sync": max(synced) if synced else None,
        "teams": [
            {
                "id": m["linear_team_id"],
                "name": m.get("linear_team_name"),
                "sync_enabled": m.get("sync_enabled", True),
                "last_sync": m.get("last_sync_at"),
                "pinecone_index": m.get("pinecone_index_name"),
            }
            for m in mappings
        ],
    }
