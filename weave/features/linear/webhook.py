"""
Linear webhook ingestion.

Each delivery is routed to a tenant through the team mapping of the team it
belongs to, then mirrored into the Linear cache tables:

- Issue   -> linear_issues (keyed by Linear issue ID)
- Comment -> interactions (interaction_type = linear_comment, keyed by comment ID)
- Project -> linear_projects (keyed by Linear project ID)

Writes are update-or-insert on Linear IDs, so redelivered events are harmless.
"""

import logging
from typing import Any, Dict, Optional

from weave.core.logging_utils import sanitize_for_logging
from weave.features.linear.records import issue_record, linked_project_row_id, project_record
from weave.features.linear.team_mappings import resolve_project_for_team
from weave.shared.errors import TeamMappingNotFound

logger = logging.getLogger("Weave.Linear.Webhook")

INTERACTION_TYPE_LINEAR_COMMENT = "linear_comment"


def extract_team_id(event: Dict[str, Any]) -> Optional[str]:
    """Issues and projects carry team.id; comments carry issue.team.id."""
    data = event.get("data") or {}
    if event.get("type") == "Comment":
        team = ((data.get("issue") or {}).get("team") or {})
        if team.get("id"):
            return team["id"]
    team = data.get("team") or {}
    if team.get("id"):
        return team["id"]
    # Project payloads list their teams by ID
    team_ids = data.get("teamIds") or []
    return team_ids[0] if team_ids else None


async def handle_issue_event(db, event: Dict[str, Any], mapping: Dict[str, Any]) -> str:
    data = event["data"]
    action = event.get("action")

    if action == "remove":
        db.linear.delete_issue(data["id"])
        logger.info(f"Deleted issue {data['id']}")
        return "deleted"

    project_id = await resolve_project_for_team(db, mapping["linear_team_id"])
    db.linear.upsert_issue(issue_record(data, mapping, project_id, linked_project_row_id(db, data)))
    logger.info(f"Synced issue {data.get('identifier') or data['id']} ({action})")
    return "synced"


async def handle_comment_event(db, event: Dict[str, Any], mapping: Dict[str, Any]) -> str:
    data = event["data"]

    if event.get("action") == "remove":
        db.linear.delete_interaction(data["id"])
        logger.info(f"Deleted comment {data['id']}")
        return "deleted"

    issue_id = (data.get("issue") or {}).get("id")
    issue = db.linear.find_issue(issue_id) if issue_id else None
    if not issue:
        logger.warning(f"Issue not found for comment: {issue_id}")
        return "skipped"

    author = data.get("user") or {}
    participants = []
    if author:
        participants.append({"name": author.get("name") or "Unknown", "email": author.get("email")})

    db.linear.upsert_interaction({
        "user_id": issue.get("user_id") or mapping["user_id"],
        "interaction_type": INTERACTION_TYPE_LINEAR_COMMENT,
        "source_id": data["id"],
        "source_url": data.get("url"),
        "title": f"Comment on {issue.get('identifier')}",
        "content": data.get("body") or "",
        "participants": participants,
        "metadata": {
            "linearIssueId": issue["linear_issue_id"],
            "linearTeamId": mapping["linear_team_id"],
            "authorId": author.get("id"),
            "editedAt": data.get("editedAt"),
        },
        "interaction_date": data.get("createdAt"),
    })
    logger.info(f"Synced comment on {issue.get('identifier')}")
    return "synced"


async def handle_project_event(db, event: Dict[str, Any], mapping: Dict[str, Any]) -> str:
    data = event["data"]

    if event.get("action") == "remove":
        db.linear.delete_project(data["id"])
        logger.info(f"Deleted project {data['id']}")
        return "deleted"

    project_id = await resolve_project_for_team(db, mapping["linear_team_id"])
    db.linear.upsert_project(project_record(data, mapping, project_id))
    logger.info(f"Synced project {data.get('name') or data['id']}")
    return "synced"


HANDLERS = {
    "Issue": handle_issue_event,
    "Comment": handle_comment_event,
    "Project": handle_project_event,
}


async def handle_event(db, event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Route a webhook event to its tenant and mirror it into the cache.

    Returns:
        {"success", "received", "team", "result"} where result is
        synced, deleted, skipped or ignored

    Raises:
        TeamMappingNotFound: The event's team is not mapped to any tenant
    """
    event_type = event.get("type")
    logger.info(
        f"Received Linear {event_type} {event.get('action')}",
        extra={"payload": sanitize_for_logging(event.get("data") or {})},
    )

    team_id = extract_team_id(event)
    mapping = db.team_mappings.find_by_team(team_id) if team_id else None
    if not mapping:
        logger.warning(f"No team mapping for team: {team_id or 'unknown'}")
        raise TeamMappingNotFound(team_id)

    handler = HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"Unhandled event type: {event_type}")
        result = "ignored"
    elif not mapping.get("sync_enabled", True):
        logger.info(f"Sync disabled for team {mapping.get('linear_team_name')}, skipping")
        result = "skipped"
    else:
        result = await handler(db, event, mapping)
        db.team_mappings.touch_sync(mapping["id"])

    return {
        "success": True,
        "received": True,
        "team": mapping.get("linear_team_name"),
        "result": result,
    }
