"""
Linear API Routes.

- POST /webhooks/linear: ingest Issue, Comment and Project events
- /linear/teams: inspect, sync and edit team mappings
- /linear/sync: pull teams, projects and issues from Linear, and report sync status
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from weave.api.dependencies import get_database, get_linear, get_user_id
from weave.features.database import DatabaseClient
from weave.features.linear import (
    LinearClient,
    get_sync_status,
    handle_event,
    list_team_mappings,
    sync_linear_data,
    sync_team_mappings,
    update_team_mapping,
)

logger = logging.getLogger("Weave.API.Linear")
router = APIRouter(tags=["Linear"])


class TeamMappingUpdate(BaseModel):
    project_id: Optional[str] = None
    sync_enabled: Optional[bool] = None


@router.post("/webhooks/linear")
async def linear_webhook(
    event: Dict[str, Any],
    db: DatabaseClient = Depends(get_database),
):
    """
    Receive a Linear webhook and mirror it into the database.

    The tenant is resolved from the team mapping of the event's team; events
    from unmapped teams get a 404.
    """
    if not event.get("type") or not isinstance(event.get("data"), dict):
        raise HTTPException(status_code=400, detail="Invalid webhook payload")

    return await handle_event(db, event)


@router.get("/webhooks/linear")
async def linear_webhook_status():
    return {"status": "ok", "service": "Linear Webhook Receiver"}


@router.get("/linear/teams")
async def get_team_mappings(
    user_id: str = Depends(get_user_id),
    db: DatabaseClient = Depends(get_database),
):
    teams = await list_team_mappings(db, user_id)
    return {"teams": teams, "total": len(teams)}


@router.post("/linear/teams/sync")
async def sync_teams(
    user_id: str = Depends(get_user_id),
    db: DatabaseClient = Depends(get_database),
    linear: LinearClient = Depends(get_linear),
):
    """Create a mapping for every Linear team that is not mapped yet."""
    result = await sync_team_mappings(db, linear, user_id)
    return {"success": True, **result}


@router.put("/linear/teams/{linear_team_id}")
async def update_team(
    linear_team_id: str,
    request: TeamMappingUpdate,
    user_id: str = Depends(get_user_id),
    db: DatabaseClient = Depends(get_database),
):
    if request.project_id is None and request.sync_enabled is None:
        raise HTTPException(status_code=400, detail="Nothing to update")

    mapping = await update_team_mapping(
        db,
        user_id,
        linear_team_id,
        project_id=request.project_id,
        sync_enabled=request.sync_enabled,
    )
    if not mapping:
        raise HTTPException(status_code=404, detail=f"Team mapping not found: {linear_team_id}")

    return {"success": True, "team": mapping}


@router.post("/linear/sync")
async def sync_linear(
    team_id: Optional[str] = None,
    user_id: str = Depends(get_user_id),
    db: DatabaseClient = Depends(get_database),
    linear: LinearClient = Depends(get_linear),
):
    """
    Pull teams, projects and issues from Linear into the cache.

    Syncs every team with sync enabled, or only ``team_id`` when given.
    Failures for a single team are listed in ``errors``.
    """
    return await sync_linear_data(db, linear, user_id, team_id=team_id)


@router.get("/linear/sync")
async def linear_sync_status(
    user_id: str = Depends(get_user_id),
    db: DatabaseClient = Depends(get_database),
):
    return await get_sync_status(db, user_id)
