"""Tests for the chat Linear tools."""

import pytest

from weave.features.chat.tools import execute_tool
from weave.shared.errors import LinearAPIError


class StubLinearClient:
    """Records mutations and answers them like Linear would."""

    def __init__(self):
        self.calls = []

    async def create_issue(self, team_id, title, description=None, priority=0, project_id=None):
        self.calls.append(("create_issue", team_id, title, priority))
        return {
            "id": "lin-issue-9",
            "identifier": "ACM-9",
            "title": title,
            "priority": priority,
            "priorityLabel": "High" if priority == 2 else "No priority",
            "state": {"id": "s1", "name": "Todo", "type": "unstarted"},
            "url": "https://linear.app/acme/issue/ACM-9",
            "team": {"id": team_id},
        }

    async def update_issue(self, issue_id, **changes):
        self.calls.append(("update_issue", issue_id, changes))
        return {
            "id": issue_id,
            "identifier": "ACM-1",
            "title": changes.get("title", "Fix login"),
            "state": {"id": "s3", "name": "Done", "type": "completed"},
        }

    async def create_comment(self, issue_id, body):
        self.calls.append(("create_comment", issue_id, body))
        return {"id": "comment-9", "body": body, "issue": {"id": issue_id, "identifier": "ACM-1"}}

    async def get_team_states(self, team_id):
        self.calls.append(("get_team_states", team_id))
        return [{"id": "s1", "name": "Todo", "type": "unstarted"}]

    async def get_team_members(self, team_id):
        self.calls.append(("get_team_members", team_id))
        return [{"id": "m1", "name": "Grace", "email": "grace@acme.com"}]


@pytest.fixture
def linear(monkeypatch):
    client = StubLinearClient()
    monkeypatch.setattr("weave.features.chat.tools.linear_tools.get_linear_client", lambda: client)
    return client


@pytest.fixture(autouse=True)
def use_database(monkeypatch, db):
    monkeypatch.setattr("weave.features.chat.tools.linear_tools.get_database_client", lambda: db)


@pytest.fixture
def mappings(supabase):
    """team-1 belongs to user-1, team-2 to another tenant."""
    supabase.table("linear_team_mappings").insert([
        {"user_id": "user-1", "linear_team_id": "team-1", "linear_team_name": "Acme",
         "project_id": "proj-acme", "sync_enabled": True},
        {"user_id": "user-2", "linear_team_id": "team-2", "linear_team_name": "Globex",
         "project_id": "proj-globex", "sync_enabled": True},
    ]).execute()


@pytest.fixture
def cached_issues(supabase, mappings):
    supabase.table("linear_issues").insert([
        {"user_id": "user-1", "linear_team_id": "team-1", "linear_issue_id": "lin-issue-1",
         "identifier": "ACM-1", "title": "Fix login"},
        {"user_id": "user-2", "linear_team_id": "team-2", "linear_issue_id": "lin-issue-2",
         "identifier": "GLX-1", "title": "New logo"},
    ]).execute()


class TestCreateIssue:

    @pytest.mark.asyncio
    async def test_creates_and_caches(self, linear, supabase, mappings):
        result = await execute_tool(
            "linear_create_issue", {"team_id": "team-1", "title": "Ship v2", "priority": 2}, "user-1"
        )

        assert result["status"] == "created"
        assert result["issue"]["identifier"] == "ACM-9"
        assert result["issue"]["priority"] == "High"
        assert linear.calls == [("create_issue", "team-1", "Ship v2", 2)]

        [issue] = supabase.rows("linear_issues")
        assert issue["identifier"] == "ACM-9"
        assert issue["user_id"] == "user-1"
        assert issue["project_id"] == "proj-acme"

    @pytest.mark.asyncio
    async def test_other_tenants_team_refused(self, linear, supabase, mappings):
        result = await execute_tool("linear_create_issue", {"team_id": "team-2", "title": "Hijack"}, "user-1")

        assert "not connected" in result["error"]
        assert linear.calls == []
        assert supabase.rows("linear_issues") == []

    @pytest.mark.asyncio
    async def test_requires_title(self, linear, mappings):
        result = await execute_tool("linear_create_issue", {"team_id": "team-1", "title": "  "}, "user-1")
        assert result == {"error": "Provide a title for the issue"}

    @pytest.mark.asyncio
    async def test_linear_failure_returned_as_error(self, monkeypatch, mappings):
        class Failing(StubLinearClient):
            async def create_issue(self, *args, **kwargs):
                raise LinearAPIError("Linear issueCreate was not successful")

        monkeypatch.setattr("weave.features.chat.tools.linear_tools.get_linear_client", lambda: Failing())

        result = await execute_tool("linear_create_issue", {"team_id": "team-1", "title": "Ship"}, "user-1")
        assert result == {"error": "Linear issueCreate was not successful"}


class TestUpdateIssue:

    @pytest.mark.asyncio
    async def test_update_by_identifier(self, linear, supabase, cached_issues):
        result = await execute_tool("linear_update_issue", {"issue_id": "ACM-1", "state_id": "s3"}, "user-1")

        assert result["status"] == "updated"
        assert linear.calls == [("update_issue", "lin-issue-1", {"state_id": "s3"})]
        issue = next(i for i in supabase.rows("linear_issues") if i["linear_issue_id"] == "lin-issue-1")
        assert issue["status"] == "Done"
        assert issue["status_type"] == "completed"

    @pytest.mark.asyncio
    async def test_other_tenants_issue_not_found(self, linear, cached_issues):
        result = await execute_tool("linear_update_issue", {"issue_id": "GLX-1", "title": "Mine now"}, "user-1")

        assert "not found" in result["error"]
        assert linear.calls == []

    @pytest.mark.asyncio
    async def test_nothing_to_update(self, linear, cached_issues):
        result = await execute_tool("linear_update_issue", {"issue_id": "ACM-1"}, "user-1")

        assert "Nothing to update" in result["error"]
        assert linear.calls == []


class TestAddComment:

    @pytest.mark.asyncio
    async def test_comment_on_cached_issue(self, linear, cached_issues):
        result = await execute_tool("linear_add_comment", {"issue_id": "lin-issue-1", "body": "On it"}, "user-1")

        assert result["status"] == "commented"
        assert result["issue"] == "ACM-1"
        assert linear.calls == [("create_comment", "lin-issue-1", "On it")]

    @pytest.mark.asyncio
    async def test_requires_body(self, linear, cached_issues):
        result = await execute_tool("linear_add_comment", {"issue_id": "ACM-1", "body": ""}, "user-1")
        assert result == {"error": "Provide issue_id and body"}

    @pytest.mark.asyncio
    async def test_unsynced_issue(self, linear, mappings):
        result = await execute_tool("linear_add_comment", {"issue_id": "ACM-404", "body": "Hi"}, "user-1")
        assert "not found" in result["error"]


class TestTeamLookups:

    @pytest.mark.asyncio
    async def test_states(self, linear, mappings):
        result = await execute_tool("linear_get_team_states", {"team_id": "team-1"}, "user-1")

        assert result["team"] == "Acme"
        assert result["states"][0]["name"] == "Todo"

    @pytest.mark.asyncio
    async def test_members(self, linear, mappings):
        result = await execute_tool("linear_get_team_members", {"team_id": "team-1"}, "user-1")
        assert result["members"] == [{"id": "m1", "name": "Grace", "email": "grace@acme.com"}]

    @pytest.mark.asyncio
    async def test_lookup_on_other_tenants_team(self, linear, mappings):
        result = await execute_tool("linear_get_team_members", {"team_id": "team-2"}, "user-1")

        assert "not connected" in result["error"]
        assert linear.calls == []
