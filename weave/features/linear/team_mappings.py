"""
Team mappings - which internal project (tenant) owns a Linear team.

Agencies run one Linear team per client. Syncing discovers the teams visible
to the Linear API key and creates a mapping for each new one, with its own
Pinecone index name for client-scoped knowledge.
"""

import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger("Weave.Linear.Teams")

PINECONE_INDEX_PREFIX = "client-"
# Pinecone index names are limited to 45 characters
MAX_INDEX_NAME_LENGTH = 45


def slugify(name: str) -> str:
    """Lowercase, dash-separated slug usable in a Pinecone index name."""
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")
    return slug or "team"


def pinecone_index_name(team_name: str) -> str:
    return (PINECONE_INDEX_PREFIX + slugify(team_name))[:MAX_INDEX_NAME_LENGTH].rstrip("-")


async def sync_team_mappings(db, linear_client, user_id: str) -> Dict[str, Any]:
    """
    Create an auto-created mapping for every Linear team not mapped yet.

    Returns:
        {"created": [mappings], "existing": int, "total": int}
    """
    teams = await linear_client.get_teams()
    mapped = {m["linear_team_id"]: m for m in db.team_mappings.list_for_user(user_id)}

    created = []
    for team in teams:
        existing = mapped.get(team["id"])
        if existing:
            # Teams renamed in Linear keep their mapping
            if team.get("name") and team["name"] != existing.get("linear_team_name"):
                db.team_mappings.update(existing["id"], {"linear_team_name": team["name"]})
            continue
        created.append(db.team_mappings.create({
            "user_id": user_id,
            "linear_team_id": team["id"],
            "linear_team_name": team.get("name"),
            "project_id": None,
            "auto_created": True,
            "sync_enabled": True,
            "pinecone_index_name": pinecone_index_name(team.get("name") or team.get("key") or team["id"]),
        }))

    logger.info(f"Team sync for {user_id}: {len(created)} created, {len(teams) - len(created)} existing")
    return {
        "created": created,
        "existing": len(teams) - len(created),
        "total": len(teams),
    }


async def list_team_mappings(db, user_id: str) -> List[Dict[str, Any]]:
    return db.team_mappings.list_for_user(user_id)


async def update_team_mapping(
    db,
    user_id: str,
    linear_team_id: str,
    project_id: Optional[str] = None,
    sync_enabled: Optional[bool] = None,
) -> Optional[Dict[str, Any]]:
    """
    Rebind a team to a project and/or toggle its sync.

    Returns:
        The updated mapping, or None if the user has no mapping for the team
    """
    mapping = db.team_mappings.get(user_id, linear_team_id)
    if not mapping:
        return None

    updates: Dict[str, Any] = {}
    if project_id is not None:
        updates["project_id"] = project_id
    if sync_enabled is not None:
        updates["sync_enabled"] = sync_enabled
    if not updates:
        return mapping

    updated = db.team_mappings.update(mapping["id"], updates)
    logger.info(f"Updated team mapping {mapping.get('linear_team_name')}: {updates}")
    return updated or {**mapping, **updates}


async def resolve_project_for_team(db, linear_team_id: str) -> Optional[str]:
    """The project receiving a team's data, or None when unmapped or sync is off."""
    mapping = db.team_mappings.find_by_team(linear_team_id)
    if not mapping or not mapping.get("sync_enabled", True):
        return None
    return mapping.get("project_id")
