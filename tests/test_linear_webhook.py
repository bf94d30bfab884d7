"""Tests for Linear webhook ingestion."""

import pytest

from weave.features.linear import handle_event, update_team_mapping
from weave.features.linear.webhook import extract_team_id
from weave.shared.errors import TeamMappingNotFound


@pytest.fixture
def mapping(supabase):
    supabase.table("linear_team_mappings").insert({
        "user_id": "user-1",
        "linear_team_id": "team-1",
        "linear_team_name": "Acme",
        "project_id": "proj-acme",
        "sync_enabled": True,
    }).execute()
    return supabase.rows("linear_team_mappings")[0]


def issue_event(action="create", **data):
    payload = {
        "id": "issue-1",
        "identifier": "ACM-1",
        "title": "Fix login",
        "team": {"id": "team-1"},
        "state": {"name": "In Progress", "type": "started"},
        "priority": 2,
        "priorityLabel": "High",
    }
    payload.update(data)
    return {"type": "Issue", "action": action, "data": payload}


def comment_event(action="create", **data):
    payload = {
        "id": "comment-1",
        "body": "Looks good",
        "issue": {"id": "issue-1", "team": {"id": "team-1"}},
        "user": {"id": "lin-user", "name": "Grace", "email": "grace@example.com"},
        "createdAt": "2026-05-01T10:00:00.000Z",
    }
    payload.update(data)
    return {"type": "Comment", "action": action, "data": payload}


class TestTeamResolution:

    def test_issue_team(self):
        assert extract_team_id(issue_event()) == "team-1"

    def test_comment_team_via_issue(self):
        assert extract_team_id(comment_event()) == "team-1"

    def test_project_team_ids(self):
        assert extract_team_id({"type": "Project", "data": {"id": "p", "teamIds": ["team-9"]}}) == "team-9"

    @pytest.mark.asyncio
    async def test_unmapped_team_raises(self, db):
        with pytest.raises(TeamMappingNotFound):
            await handle_event(db, issue_event())


class TestIssueEvents:

    @pytest.mark.asyncio
    async def test_create_then_update_upserts(self, db, supabase, mapping):
        result = await handle_event(db, issue_event())
        assert result == {"success": True, "received": True, "team": "Acme", "result": "synced"}

        await handle_event(db, issue_event(action="update", title="Fix login for real"))

        [issue] = supabase.rows("linear_issues")
        assert issue["title"] == "Fix login for real"
        assert issue["user_id"] == "user-1"
        assert issue["project_id"] == "proj-acme"
        assert issue["status"] == "In Progress"
        assert issue["priority_label"] == "High"
        assert issue["linear_project_id"] is None

    @pytest.mark.asyncio
    async def test_defaults_for_missing_fields(self, db, supabase, mapping):
        await handle_event(db, issue_event(state=None, priority=None, priorityLabel=None))

        [issue] = supabase.rows("linear_issues")
        assert issue["priority"] == 0
        assert issue["priority_label"] == "No priority"
        assert issue["status"] == "Unknown"
        assert issue["status_type"] == "unstarted"

    @pytest.mark.asyncio
    async def test_links_known_project(self, db, supabase, mapping):
        await handle_event(db, {"type": "Project", "action": "create", "data": {
            "id": "lin-proj-1", "name": "Website", "teamIds": ["team-1"],
        }})
        await handle_event(db, issue_event(project={"id": "lin-proj-1"}))

        [project] = supabase.rows("linear_projects")
        [issue] = supabase.rows("linear_issues")
        assert issue["linear_project_id"] == project["id"]

    @pytest.mark.asyncio
    async def test_remove_deletes(self, db, supabase, mapping):
        await handle_event(db, issue_event())
        result = await handle_event(db, issue_event(action="remove"))

        assert result["result"] == "deleted"
        assert supabase.rows("linear_issues") == []

    @pytest.mark.asyncio
    async def test_touches_mapping_sync_time(self, db, supabase, mapping):
        await handle_event(db, issue_event())
        assert supabase.rows("linear_team_mappings")[0]["last_sync_at"]

    @pytest.mark.asyncio
    async def test_rebound_team_files_into_new_project(self, db, supabase, mapping):
        await update_team_mapping(db, "user-1", "team-1", project_id="proj-new")
        await handle_event(db, issue_event())
        await handle_event(db, {"type": "Project", "action": "create", "data": {
            "id": "lin-proj-1", "name": "Website", "teamIds": ["team-1"],
        }})

        assert supabase.rows("linear_issues")[0]["project_id"] == "proj-new"
        assert supabase.rows("linear_projects")[0]["project_id"] == "proj-new"


class TestCommentEvents:

    @pytest.mark.asyncio
    async def test_comment_becomes_interaction(self, db, supabase, mapping):
        await handle_event(db, issue_event())
        await handle_event(db, comment_event())

        [interaction] = supabase.rows("interactions")
        assert interaction["interaction_type"] == "linear_comment"
        assert interaction["title"] == "Comment on ACM-1"
        assert interaction["content"] == "Looks good"
        assert interaction["user_id"] == "user-1"
        assert interaction["participants"] == [{"name": "Grace", "email": "grace@example.com"}]
        assert interaction["metadata"]["linearIssueId"] == "issue-1"

    @pytest.mark.asyncio
    async def test_comment_on_unknown_issue_skipped(self, db, supabase, mapping):
        result = await handle_event(db, comment_event())
        assert result["result"] == "skipped"
        assert supabase.rows("interactions") == []

    @pytest.mark.asyncio
    async def test_redelivery_does_not_duplicate(self, db, supabase, mapping):
        await handle_event(db, issue_event())
        await handle_event(db, comment_event())
        await handle_event(db, comment_event(action="update", body="Edited"))

        [interaction] = supabase.rows("interactions")
        assert interaction["content"] == "Edited"

    @pytest.mark.asyncio
    async def test_remove_deletes(self, db, supabase, mapping):
        await handle_event(db, issue_event())
        await handle_event(db, comment_event())
        await handle_event(db, comment_event(action="remove"))
        assert supabase.rows("interactions") == []


class TestOtherEvents:

    @pytest.mark.asyncio
    async def test_unknown_type_acknowledged(self, db, supabase, mapping):
        result = await handle_event(db, {"type": "Label", "action": "create", "data": {"id": "l1", "team": {"id": "team-1"}}})
        assert result["result"] == "ignored"

    @pytest.mark.asyncio
    async def test_sync_disabled_skips(self, db, supabase, mapping):
        supabase.rows("linear_team_mappings")[0]["sync_enabled"] = False
        result = await handle_event(db, issue_event())
        assert result["result"] == "skipped"
        assert supabase.rows("linear_issues") == []
