"""
Linear Tools for Chat.

This module contains tools that let Claude act in Linear for the user:
create and update issues, comment, and look up the workflow states and
members needed to do so.

Tools only touch teams the user has mapped and issues already synced for
them. Created and updated issues are written back to the cache right away so
search and follow-up tools see them before the webhook arrives.
"""

import logging
from typing import Any, Dict, Optional

from weave.core.logging_utils import preview
from weave.features.database import get_database_client
from weave.features.linear import get_linear_client
from weave.features.linear.records import issue_record, linked_project_row_id
from weave.features.linear.team_mappings import resolve_project_for_team

logger = logging.getLogger("Weave.Chat.Tools.Linear")

PRIORITY_DESCRIPTION = "0=None, 1=Urgent, 2=High, 3=Medium, 4=Low"


# =============================================================================
# TOOL DEFINITIONS
# =============================================================================

LINEAR_TOOLS = [
    {
        "name": "linear_create_issue",
        "description": """Create a new issue in Linear.
Use when the user asks to create a task, bug or issue for one of their clients.
The team must be one of the user's connected Linear teams.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "team_id": {
                    "type": "string",
                    "description": "The Linear team ID"
                },
                "title": {
                    "type": "string",
                    "description": "Short, descriptive issue title"
                },
                "description": {
                    "type": "string",
                    "description": "Details of the issue (Markdown)"
                },
                "priority": {
                    "type": "integer",
                    "enum": [0, 1, 2, 3, 4],
                    "description": f"Priority: {PRIORITY_DESCRIPTION} (default 0)"
                },
                "project_id": {
                    "type": "string",
                    "description": "Linear project ID to put the issue in"
                }
            },
            "required": ["team_id", "title"]
        }
    },
    {
        "name": "linear_update_issue",
        "description": """Update an existing Linear issue: title, description, priority or status.
To change status, get the state ID from linear_get_team_states first.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "issue_id": {
                    "type": "string",
                    "description": "Issue identifier (e.g. 'ENG-123') or Linear issue ID"
                },
                "title": {"type": "string", "description": "New title"},
                "description": {"type": "string", "description": "New description"},
                "priority": {
                    "type": "integer",
                    "enum": [0, 1, 2, 3, 4],
                    "description": f"New priority: {PRIORITY_DESCRIPTION}"
                },
                "state_id": {
                    "type": "string",
                    "description": "Workflow state ID to move the issue to"
                }
            },
            "required": ["issue_id"]
        }
    },
    {
        "name": "linear_add_comment",
        "description": "Add a comment to a Linear issue when the user asks to note or reply on it.",
        "input_schema": {
            "type": "object",
            "properties": {
                "issue_id": {
                    "type": "string",
                    "description": "Issue identifier (e.g. 'ENG-123') or Linear issue ID"
                },
                "body": {
                    "type": "string",
                    "description": "Comment text (Markdown)"
                }
            },
            "required": ["issue_id", "body"]
        }
    },
    {
        "name": "linear_get_team_states",
        "description": """List the workflow states of a Linear team (e.g. Todo, In Progress, Done).
Use before linear_update_issue to find the right state ID.""",
        "input_schema": {
            "type": "object",
            "properties": {
                "team_id": {"type": "string", "description": "The Linear team ID"}
            },
            "required": ["team_id"]
        }
    },
    {
        "name": "linear_get_team_members",
        "description": "List the members of a Linear team with their IDs and emails.",
        "input_schema": {
            "type": "object",
            "properties": {
                "team_id": {"type": "string", "description": "The Linear team ID"}
            },
            "required": ["team_id"]
        }
    },
]


# =============================================================================
# HELPERS
# =============================================================================

def _team_mapping(db, user_id: str, team_id: Optional[str]) -> Optional[Dict[str, Any]]:
    if not team_id:
        return None
    return db.team_mappings.get(user_id, team_id)


def _team_not_connected(team_id: Optional[str]) -> Dict[str, Any]:
    return {"error": f"Linear team {team_id or '(none)'} is not connected for this user"}


def _issue_not_found(issue_ref: str) -> Dict[str, Any]:
    return {"error": f"Issue {issue_ref} not found in synced Linear data - run a Linear sync first"}


def _issue_summary(issue: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": issue.get("id"),
        "identifier": issue.get("identifier"),
        "title": issue.get("title"),
        "priority": issue.get("priorityLabel"),
        "status": (issue.get("state") or {}).get("name"),
        "url": issue.get("url"),
    }


async def _cache_issue(db, issue: Dict[str, Any], mapping: Dict[str, Any]) -> None:
    project_id = await resolve_project_for_team(db, mapping["linear_team_id"])
    db.linear.upsert_issue(issue_record(issue, mapping, project_id, linked_project_row_id(db, issue)))


# =============================================================================
# TOOL IMPLEMENTATIONS
# =============================================================================

async def _linear_create_issue(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Create an issue in one of the user's mapped teams."""
    title = (tool_input.get("title") or "").strip()
    if not title:
        return {"error": "Provide a title for the issue"}

    db = get_database_client()
    mapping = _team_mapping(db, user_id, tool_input.get("team_id"))
    if not mapping:
        return _team_not_connected(tool_input.get("team_id"))

    issue = await get_linear_client().create_issue(
        team_id=mapping["linear_team_id"],
        title=title,
        description=tool_input.get("description"),
        priority=tool_input.get("priority") or 0,
        project_id=tool_input.get("project_id"),
    )
    await _cache_issue(db, issue, mapping)

    return {
        "status": "created",
        "issue": _issue_summary(issue),
        "message": f"Created issue {issue.get('identifier')}: {issue.get('title')}"
    }


async def _linear_update_issue(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    issue_ref = (tool_input.get("issue_id") or "").strip()
    if not issue_ref:
        return {"error": "Provide issue_id to specify which issue to update"}

    changes = {
        key: tool_input[key]
        for key in ("title", "description", "priority", "state_id")
        if tool_input.get(key) is not None
    }
    if not changes:
        return {"error": "Nothing to update - provide title, description, priority or state_id"}

    db = get_database_client()
    cached = db.linear.find_issue_for_user(user_id, issue_ref)
    if not cached:
        return _issue_not_found(issue_ref)

    issue = await get_linear_client().update_issue(cached["linear_issue_id"], **changes)
    mapping = _team_mapping(db, user_id, cached["linear_team_id"])
    if mapping:
        await _cache_issue(db, issue, mapping)

    return {
        "status": "updated",
        "issue": _issue_summary(issue),
        "message": f"Updated issue {issue.get('identifier')}"
    }


async def _linear_add_comment(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    issue_ref = (tool_input.get("issue_id") or "").strip()
    body = (tool_input.get("body") or "").strip()
    if not issue_ref or not body:
        return {"error": "Provide issue_id and body"}

    cached = get_database_client().linear.find_issue_for_user(user_id, issue_ref)
    if not cached:
        return _issue_not_found(issue_ref)

    comment = await get_linear_client().create_comment(cached["linear_issue_id"], body)
    identifier = (comment.get("issue") or {}).get("identifier") or cached.get("identifier")

    logger.info(f"Commented on {identifier}: {preview(body, 50)}")
    return {
        "status": "commented",
        "comment_id": comment.get("id"),
        "issue": identifier,
        "message": f"Added comment to {identifier}"
    }


async def _linear_get_team_states(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    mapping = _team_mapping(get_database_client(), user_id, tool_input.get("team_id"))
    if not mapping:
        return _team_not_connected(tool_input.get("team_id"))

    states = await get_linear_client().get_team_states(mapping["linear_team_id"])
    return {"status": "ok", "team": mapping.get("linear_team_name"), "states": states}


async def _linear_get_team_members(tool_input: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    mapping = _team_mapping(get_database_client(), user_id, tool_input.get("team_id"))
    if not mapping:
        return _team_not_connected(tool_input.get("team_id"))

    members = await get_linear_client().get_team_members(mapping["linear_team_id"])
    return {"status": "ok", "team": mapping.get("linear_team_name"), "members": members}
