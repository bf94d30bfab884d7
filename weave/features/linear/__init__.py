"""
Linear Feature Module - issue tracker sync

- client: GraphQL client (teams, projects, issues, states, members and mutations)
- webhook: mirrors Issue, Comment and Project events into the cache tables
- team_mappings: binds Linear teams to internal projects
- sync: pull sync of teams, projects and issues into the cache tables
"""

from weave.features.linear.client import LinearClient, get_linear_client
from weave.features.linear.webhook import handle_event
from weave.features.linear.team_mappings import (
    list_team_mappings,
    resolve_project_for_team,
    sync_team_mappings,
    update_team_mapping,
)
from weave.features.linear.sync import get_sync_status, sync_linear_data

__all__ = [
    "LinearClient",
    "get_linear_client",
    "get_sync_status",
    "handle_event",
    "list_team_mappings",
    "resolve_project_for_team",
    "sync_team_mappings",
    "sync_linear_data",
    "update_team_mapping",
]
