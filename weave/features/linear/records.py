"""
Row builders for the Linear cache tables.

Webhook payloads, pull-sync query results and mutation results all describe
issues and projects with the same Linear field names; these functions turn
any of them into linear_issues / linear_projects rows.
"""

from typing import Any, Dict, List, Optional


def _nodes(value: Any) -> List[Any]:
    """Connections arrive as {"nodes": [...]} from GraphQL and as lists from webhooks."""
    if isinstance(value, dict):
        return value.get("nodes") or []
    return value or []


def issue_record(
    data: Dict[str, Any],
    mapping: Dict[str, Any],
    project_id: Optional[str],
    project_row_id: Optional[str],
) -> Dict[str, Any]:
    state = data.get("state") or {}
    assignee = data.get("assignee") or {}
    return {
        "user_id": mapping["user_id"],
        "project_id": project_id,
        "linear_team_id": mapping["linear_team_id"],
        "linear_project_id": project_row_id,
        "linear_issue_id": data["id"],
        "identifier": data.get("identifier") or data["id"],
        "title": data.get("title"),
        "description": data.get("description"),
        "priority": data.get("priority") or 0,
        "priority_label": data.get("priorityLabel") or "No priority",
        "status": state.get("name") or "Unknown",
        "status_type": state.get("type") or "unstarted",
        "assignee": assignee.get("name"),
        "assignee_email": assignee.get("email"),
        "estimate": data.get("estimate"),
        "due_date": data.get("dueDate"),
        "completed_at": data.get("completedAt"),
        "url": data.get("url") or "",
        "labels": _nodes(data.get("labels")),
    }


def project_record(data: Dict[str, Any], mapping: Dict[str, Any], project_id: Optional[str]) -> Dict[str, Any]:
    lead = data.get("lead") or {}
    return {
        "user_id": mapping["user_id"],
        "project_id": project_id,
        "linear_team_id": mapping["linear_team_id"],
        "linear_project_id": data["id"],
        "name": data.get("name"),
        "description": data.get("description"),
        "state": data.get("state"),
        "lead": lead.get("name"),
        "lead_email": lead.get("email"),
        "progress": data.get("progress") or 0,
        "url": data.get("url") or "",
        "start_date": data.get("startDate"),
        "target_date": data.get("targetDate"),
    }


def linked_project_row_id(db, data: Dict[str, Any]) -> Optional[str]:
    """Row ID of the cached project an issue belongs to; issues may arrive before their project."""
    linear_project = data.get("project") or {}
    if not linear_project.get("id"):
        return None
    project = db.linear.find_project(linear_project["id"])
    return project["id"] if project else None
